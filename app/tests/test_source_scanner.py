#!/usr/bin/env python3
"""
Tests for source scanning and key extraction in ResxLocalizationGenerator.

This module tests:
- Finding view and code files in a solution tree
- Skipping partial files and ignored folders
- Extracting localizer keys and data annotation references
"""

import os
import shutil
import sys
import tempfile
import unittest
from pathlib import Path

# Add parent directory to path for module import
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from ResxLocalizationGenerator import (
    DataAnnotationIndex,
    SourceScanError,
    extract_data_annotations,
    extract_localizer_keys,
    find_source_files,
    read_source_file,
)
from git_utils import GitIgnoreMatcher, parse_gitignore_file


class TestSourceScanner(unittest.TestCase):
    """Base class with a temporary solution directory."""

    def setUp(self):
        self.temp_dir = tempfile.mkdtemp()

    def tearDown(self):
        shutil.rmtree(self.temp_dir)

    def create_file(self, relative_path, content=""):
        path = os.path.join(self.temp_dir, *relative_path.split("/"))
        os.makedirs(os.path.dirname(path), exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            f.write(content)
        return path

    def relative_names(self, files):
        return [
            Path(os.path.relpath(path, self.temp_dir)).as_posix() for path in files
        ]


class TestFindSourceFiles(TestSourceScanner):
    """Tests for the find_source_files function."""

    def test_empty_directory(self):
        self.assertEqual(find_source_files(self.temp_dir), [])

    def test_finds_views_and_code_files(self):
        self.create_file("Web/Views/Home/Index.cshtml")
        self.create_file("Web/Controllers/HomeController.cs")
        self.create_file("Web/wwwroot/js/site.js")
        self.create_file("Web/appsettings.json")

        files = find_source_files(self.temp_dir)

        self.assertEqual(
            self.relative_names(files),
            ["Web/Controllers/HomeController.cs", "Web/Views/Home/Index.cshtml"],
        )

    def test_skips_files_starting_with_underscore(self):
        self.create_file("Web/Views/Shared/_Layout.cshtml")
        self.create_file("Web/Views/_ViewImports.cshtml")
        self.create_file("Web/Views/Shared/Error.cshtml")

        files = find_source_files(self.temp_dir)

        self.assertEqual(self.relative_names(files), ["Web/Views/Shared/Error.cshtml"])

    def test_extension_match_is_case_insensitive(self):
        self.create_file("Web/Views/About.CSHTML")

        files = find_source_files(self.temp_dir)

        self.assertEqual(self.relative_names(files), ["Web/Views/About.CSHTML"])

    def test_controller_suffix_configuration(self):
        """Views plus *Controller.cs files only."""
        self.create_file("Web/Views/Index.cshtml")
        self.create_file("Web/Controllers/HomeController.cs")
        self.create_file("Web/Models/User.cs")

        files = find_source_files(self.temp_dir, extensions=(".cshtml", "Controller.cs"))

        self.assertEqual(
            self.relative_names(files),
            ["Web/Controllers/HomeController.cs", "Web/Views/Index.cshtml"],
        )

    def test_gitignore_folders_are_skipped(self):
        self.create_file(".gitignore", "bin/\nobj/\n*.g.cs\n")
        self.create_file("Web/bin/Debug/Generated.cs")
        self.create_file("Web/obj/Razor.cs")
        self.create_file("Web/Models/User.g.cs")
        self.create_file("Web/Models/User.cs")

        files = find_source_files(self.temp_dir)

        self.assertEqual(self.relative_names(files), ["Web/Models/User.cs"])

    def test_nested_gitignore_is_applied(self):
        self.create_file("Web/.gitignore", "Generated/\n")
        self.create_file("Web/Generated/Proxy.cs")
        self.create_file("Api/Generated/Proxy.cs")

        files = find_source_files(self.temp_dir)

        self.assertEqual(self.relative_names(files), ["Api/Generated/Proxy.cs"])

    def test_explicit_ignore_folders_replace_gitignore(self):
        self.create_file(".gitignore", "bin/\n")
        self.create_file("Web/bin/Generated.cs")
        self.create_file("Web/Tests/HomeTests.cs")
        self.create_file("Web/Models/User.cs")

        files = find_source_files(self.temp_dir, ignore_folders=["Tests"])

        self.assertEqual(
            self.relative_names(files),
            ["Web/Models/User.cs", "Web/bin/Generated.cs"],
        )

    def test_missing_root_is_fatal(self):
        with self.assertRaises(SourceScanError):
            find_source_files(os.path.join(self.temp_dir, "missing"))

    def test_file_as_root_is_fatal(self):
        path = self.create_file("Index.cshtml")
        with self.assertRaises(SourceScanError):
            find_source_files(path)


class TestReadSourceFile(TestSourceScanner):
    """Tests for reading individual files."""

    def test_reads_utf8_with_bom(self):
        path = os.path.join(self.temp_dir, "Index.cshtml")
        with open(path, "wb") as f:
            f.write('\ufeff@Localizer["Şifre"]'.encode("utf-8"))

        self.assertEqual(read_source_file(Path(path)), '@Localizer["Şifre"]')

    def test_unreadable_file_is_skipped(self):
        with self.assertLogs("ResxLocalizationGenerator", level="WARNING") as cm:
            content = read_source_file(Path(self.temp_dir) / "missing.cshtml")

        self.assertIsNone(content)
        self.assertIn("Skipping unreadable file", "\n".join(cm.output))


class TestGitIgnoreMatcher(TestSourceScanner):
    """Tests for gitignore handling."""

    def test_parse_gitignore_file_skips_comments(self):
        path = self.create_file(".gitignore", "# build output\n\nbin/\n  obj/  \n")
        self.assertEqual(parse_gitignore_file(path), ["bin/", "obj/"])

    def test_negation_within_file(self):
        self.create_file(".gitignore", "*.cs\n!Keep.cs\n")
        matcher = GitIgnoreMatcher(self.temp_dir)

        self.assertTrue(
            matcher.is_ignored(os.path.join(self.temp_dir, "Drop.cs"), is_dir=False)
        )
        self.assertFalse(
            matcher.is_ignored(os.path.join(self.temp_dir, "Keep.cs"), is_dir=False)
        )

    def test_directory_pattern_only_matches_directories(self):
        self.create_file(".gitignore", "bin/\n")
        matcher = GitIgnoreMatcher(self.temp_dir)

        self.assertTrue(matcher.is_ignored(os.path.join(self.temp_dir, "bin"), is_dir=True))
        self.assertFalse(matcher.is_ignored(os.path.join(self.temp_dir, "bin"), is_dir=False))

    def test_root_itself_is_never_ignored(self):
        self.create_file(".gitignore", "*\n")
        matcher = GitIgnoreMatcher(self.temp_dir)

        self.assertFalse(matcher.is_ignored(self.temp_dir, is_dir=True))


class TestExtractLocalizerKeys(unittest.TestCase):
    """Tests for the localizer call pattern."""

    def test_both_call_styles(self):
        content = """
<h1>@Localizer["FirstName"]</h1>
<p>@Localizer["Welcome"]</p>
var message = _localizer["LastName"];
"""
        self.assertEqual(
            extract_localizer_keys(content), {"FirstName", "Welcome", "LastName"}
        )

    def test_matching_is_case_insensitive(self):
        content = '@localizer["FirstName"] _Localizer["LastName"] @LOCALIZER["Title"]'
        self.assertEqual(
            extract_localizer_keys(content), {"FirstName", "LastName", "Title"}
        )

    def test_keys_are_deduplicated(self):
        content = '@Localizer["Save"] @Localizer["Save"] _localizer["Save"]'
        self.assertEqual(extract_localizer_keys(content), {"Save"})

    def test_empty_key_is_ignored(self):
        self.assertEqual(extract_localizer_keys('@Localizer[""]'), set())

    def test_key_with_control_character_is_skipped(self):
        content = '@Localizer["A\x01B"] @Localizer["Save"]'
        with self.assertLogs("ResxLocalizationGenerator", level="WARNING") as cm:
            keys = extract_localizer_keys(content)

        self.assertEqual(keys, {"Save"})
        self.assertIn("not valid in XML", "\n".join(cm.output))

    def test_other_calls_are_not_matched(self):
        content = 'Localizer["NoPrefix"] @Html.Raw("Text") ViewData["Title"]'
        self.assertEqual(extract_localizer_keys(content), set())

    def test_no_matches(self):
        self.assertEqual(extract_localizer_keys("public class Empty {}"), set())


class TestExtractDataAnnotations(unittest.TestCase):
    """Tests for the validation attribute pattern."""

    def test_extracts_type_and_name(self):
        content = """
public class UserModel
{
    [Required(ErrorMessageResourceType = typeof(MyApp.Resources.Errors.Messages), ErrorMessageResourceName = "NameRequired")]
    public string Name { get; set; }

    [StringLength(50, ErrorMessageResourceType=typeof( MyApp.Resources.Errors.Messages ),
        ErrorMessageResourceName="NameTooLong")]
    public string Surname { get; set; }
}
"""
        self.assertEqual(
            extract_data_annotations(content),
            [
                ("MyApp.Resources.Errors.Messages", "NameRequired"),
                ("MyApp.Resources.Errors.Messages", "NameTooLong"),
            ],
        )

    def test_reversed_order_is_not_matched(self):
        content = (
            '[Required(ErrorMessageResourceName = "NameRequired", '
            "ErrorMessageResourceType = typeof(MyApp.Resources.Messages))]"
        )
        self.assertEqual(extract_data_annotations(content), [])

    def test_missing_comma_is_not_matched(self):
        content = (
            "[Required(ErrorMessageResourceType = typeof(MyApp.Resources.Messages) "
            'ErrorMessageResourceName = "NameRequired")]'
        )
        self.assertEqual(extract_data_annotations(content), [])

    def test_blank_name_is_skipped(self):
        content = (
            "[Required(ErrorMessageResourceType = typeof(Web.Resources.Msg), "
            'ErrorMessageResourceName = " ")]\n'
            "[Required(ErrorMessageResourceType = typeof(Web.Resources.Msg), "
            'ErrorMessageResourceName = "Required")]'
        )
        self.assertEqual(
            extract_data_annotations(content), [("Web.Resources.Msg", "Required")]
        )

    def test_blank_type_is_skipped(self):
        content = (
            "[Required(ErrorMessageResourceType = typeof( ), "
            'ErrorMessageResourceName = "Required")]'
        )
        self.assertEqual(extract_data_annotations(content), [])

    def test_name_with_control_character_is_skipped(self):
        content = (
            "[Required(ErrorMessageResourceType = typeof(Web.Resources.Msg), "
            'ErrorMessageResourceName = "Bad\x01Name")]'
        )
        with self.assertLogs("ResxLocalizationGenerator", level="WARNING"):
            self.assertEqual(extract_data_annotations(content), [])


class TestDataAnnotationIndex(unittest.TestCase):
    """Tests for the data annotation accumulator."""

    def test_add_and_iterate_sorted(self):
        index = DataAnnotationIndex()
        index.add("Web", "Web.Resources.Messages", "Required")
        index.add("Api", "Api.Resources.Errors", "NotFound")
        index.add("Web", "Web.Resources.Messages", "Invalid")
        index.add("Web", "Web.Resources.Messages", "Required")

        self.assertEqual(
            list(index.items()),
            [
                ("Api", "Api.Resources.Errors", ["NotFound"]),
                ("Web", "Web.Resources.Messages", ["Invalid", "Required"]),
            ],
        )
        self.assertEqual(len(index), 3)

    def test_empty_index(self):
        index = DataAnnotationIndex()
        self.assertEqual(list(index.items()), [])
        self.assertEqual(len(index), 0)


if __name__ == "__main__":
    unittest.main()
