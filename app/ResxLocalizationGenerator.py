#!/usr/bin/env python3
"""
ResX Localization Generator

This script scans an ASP.NET solution for localizer keys (@Localizer["Key"],
_localizer["Key"]) and data annotation resource references, generates or merges
.resx resource files for every configured language, and can automatically
translate new entries. Existing entries are never modified or removed.
"""

import argparse
import logging
import os
import re
import shutil
import sys
from collections import defaultdict
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Sequence, Set, Tuple
from lxml import etree
from git_utils import GitIgnoreMatcher
from language_utils import NEUTRAL_LANGUAGE, get_language_name, is_known_language
from string_utils import format_localizer_key, is_xml_compatible

from translation_provider import (
    DEFAULT_LLM_MODEL,
    DEFAULT_TIMEOUT,
    TranslationProvider,
    Translator,
    TranslatorConfig,
    create_translator,
)

# ------------------------------------------------------------------------------
# Constants
# ------------------------------------------------------------------------------

DEFAULT_EXTENSIONS = (".cshtml", ".cs")
DEFAULT_LANGUAGES = ("en", "tr")
DEFAULT_SOURCE_LANGUAGE = "en"

# Folder created in every project for generated resources. It is also the
# namespace segment that anchors data annotation resource types.
RESOURCES_FOLDER = "Resources"

LOCALIZER_PATTERN = re.compile(
    r'(?:@Localizer\["(.*?)"\]|_localizer\["(.*?)"\])', re.IGNORECASE
)
DATA_ANNOTATION_PATTERN = re.compile(
    r"ErrorMessageResourceType\s*=\s*typeof\(([^)]+)\)\s*,\s*"
    r'ErrorMessageResourceName\s*=\s*"([^"]+)"',
    re.IGNORECASE,
)

# Schema block written by Visual Studio into every .resx file
RESX_SCHEMA = """\
<xsd:schema id="root" xmlns="" xmlns:xsd="http://www.w3.org/2001/XMLSchema" xmlns:msdata="urn:schemas-microsoft-com:xml-msdata">
  <xsd:element name="root" msdata:IsDataSet="true">
    <xsd:complexType>
      <xsd:choice maxOccurs="unbounded">
        <xsd:element name="data">
          <xsd:complexType>
            <xsd:sequence>
              <xsd:element name="value" type="xsd:string" minOccurs="0" msdata:Ordinal="1" />
              <xsd:element name="comment" type="xsd:string" minOccurs="0" msdata:Ordinal="2" />
            </xsd:sequence>
            <xsd:attribute name="name" type="xsd:string" msdata:Ordinal="1" />
            <xsd:attribute name="type" type="xsd:string" msdata:Ordinal="3" />
            <xsd:attribute name="mimetype" type="xsd:string" msdata:Ordinal="4" />
          </xsd:complexType>
        </xsd:element>
        <xsd:element name="resheader">
          <xsd:complexType>
            <xsd:sequence>
              <xsd:element name="value" type="xsd:string" minOccurs="0" msdata:Ordinal="1" />
            </xsd:sequence>
            <xsd:attribute name="name" type="xsd:string" use="required" />
          </xsd:complexType>
        </xsd:element>
      </xsd:choice>
    </xsd:complexType>
  </xsd:element>
</xsd:schema>"""

# Header values must match what ResXResourceReader expects, verbatim
RESX_HEADERS = (
    ("resmimetype", "text/microsoft-resx"),
    ("version", "1.3"),
    (
        "reader",
        "System.Resources.ResXResourceReader, System.Windows.Forms, "
        "Version=2.0.3500.0, Culture=neutral",
    ),
    (
        "writer",
        "System.Resources.ResXResourceWriter, System.Windows.Forms, "
        "Version=2.0.3500.0, Culture=neutral",
    ),
)

CODEGEN_METADATA_NAME = "ResXFileCodeGenerator"
CODEGEN_METADATA_TYPE = "System.Resources.ResXFileRef, System.Windows.Forms"
CODEGEN_METADATA_VALUE = "PublicResXFileCodeGenerator"

XML_SPACE = "{http://www.w3.org/XML/1998/namespace}space"

# ------------------------------------------------------------------------------
# Errors
# ------------------------------------------------------------------------------


class ResxGeneratorError(Exception):
    """Base class for generator errors."""


class SourceScanError(ResxGeneratorError):
    """The source root cannot be scanned. Fatal for the run."""


class InvalidResourceTypeError(ResxGeneratorError):
    """A data annotation resource type cannot be mapped to a .resx file."""


# ------------------------------------------------------------------------------
# Logger Setup
# ------------------------------------------------------------------------------

logger = logging.getLogger(__name__)

HTTP_CLIENT_LOGGERS = ("requests", "urllib3", "openai", "httpx", "httpcore")


def configure_logging(trace: bool) -> None:
    """
    Send log records from the generator and its helper modules to the console.

    With trace enabled the generator logs every skipped file and added key.
    The HTTP clients behind the translators (requests/urllib3 for MyMemory,
    httpx for the openai SDK) stay at WARNING either way.
    """
    level = logging.DEBUG if trace else logging.INFO
    formatter = logging.Formatter("%(asctime)s [%(levelname)s] %(message)s")

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    if root_logger.handlers:
        for handler in root_logger.handlers:
            handler.setFormatter(formatter)
    else:
        handler = logging.StreamHandler()
        handler.setFormatter(formatter)
        root_logger.addHandler(handler)

    for name in HTTP_CLIENT_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


# ------------------------------------------------------------------------------
# Settings
# ------------------------------------------------------------------------------


def parse_languages(value: Optional[str]) -> List[str]:
    """
    Parse a comma separated language list.

    The neutral language is always included and always comes first.
    Duplicates are dropped while keeping the given order.
    """
    languages = [NEUTRAL_LANGUAGE]
    for language in (value or "").split(","):
        language = language.strip()
        if language and language not in languages:
            languages.append(language)
    return languages


def parse_extensions(value: Optional[str]) -> Tuple[str, ...]:
    """Parse a comma separated list of file name suffixes (e.g. '.cshtml,.cs')."""
    extensions = tuple(ext.strip() for ext in (value or "").split(",") if ext.strip())
    return extensions or DEFAULT_EXTENSIONS


@dataclass
class GeneratorSettings:
    """
    Settings for one generator run.

    Attributes:
        source_path: Root of the solution to scan
        output_path: Root under which <project>/Resources folders are written
        languages: Culture suffixes to generate; "" is the neutral culture
        source_language: Language the keys are written in; never translated
        extensions: File name suffixes of the files to scan
        ignore_folders: Folder names to skip; .gitignore rules apply when empty
        dry_run: Report new entries without translating or writing files
    """

    source_path: Path
    output_path: Path
    languages: List[str] = field(
        default_factory=lambda: parse_languages(",".join(DEFAULT_LANGUAGES))
    )
    source_language: str = DEFAULT_SOURCE_LANGUAGE
    extensions: Tuple[str, ...] = DEFAULT_EXTENSIONS
    ignore_folders: List[str] = field(default_factory=list)
    dry_run: bool = False

    def __post_init__(self):
        self.source_path = Path(self.source_path)
        self.output_path = Path(self.output_path)
        self.languages = parse_languages(",".join(self.languages))


# ------------------------------------------------------------------------------
# Source Scanning & Key Extraction
# ------------------------------------------------------------------------------


def find_source_files(
    source_path,
    extensions: Sequence[str] = DEFAULT_EXTENSIONS,
    ignore_folders: Optional[Sequence[str]] = None,
) -> List[Path]:
    """
    Recursively collect the source files to scan for localization keys.

    Files are selected by name suffix (case-insensitive), and files whose name
    starts with an underscore (partial views such as _Layout.cshtml) are
    excluded. Folders are skipped either by an explicit list of folder names
    or, when no list is given, by the .gitignore files that apply to them.
    Symlinked directories are not followed.

    Args:
        source_path: Root directory of the solution
        extensions: File name suffixes to include
        ignore_folders: Optional folder names to skip

    Returns:
        Sorted list of file paths

    Raises:
        SourceScanError: If the root directory does not exist or cannot be read
    """
    root = Path(source_path)
    if not root.is_dir():
        raise SourceScanError(f"The specified path {root} does not exist!")
    try:
        os.listdir(root)
    except OSError as e:
        raise SourceScanError(f"Cannot read source directory {root}: {e}") from e

    suffixes = tuple(ext.lower() for ext in extensions)
    ignored_names = set(ignore_folders or [])
    matcher = None

    if ignored_names:
        logger.info(f"Using explicit ignore folders: {', '.join(sorted(ignored_names))}")
    else:
        matcher = GitIgnoreMatcher(str(root))
        if matcher.pattern_sources:
            logger.info(
                f"Using patterns from {matcher.pattern_sources} .gitignore file(s)"
            )

    def _on_walk_error(error: OSError) -> None:
        logger.warning(f"Skipping unreadable directory {error.filename}: {error}")

    files: List[Path] = []
    logger.info(f"Scanning for source files in {root}")

    for dirpath, dirnames, filenames in os.walk(root, onerror=_on_walk_error):
        if matcher is not None:
            matcher.load_directory(dirpath)

        kept_dirs = []
        for dirname in sorted(dirnames):
            if dirname in ignored_names:
                logger.debug(f"Skipping {os.path.join(dirpath, dirname)} (matched ignore_folders)")
                continue
            if matcher is not None and matcher.is_ignored(
                os.path.join(dirpath, dirname), is_dir=True
            ):
                logger.debug(f"Skipping {os.path.join(dirpath, dirname)} (matched gitignore pattern)")
                continue
            kept_dirs.append(dirname)
        dirnames[:] = kept_dirs

        for filename in filenames:
            if filename.startswith("_"):
                continue
            if not filename.lower().endswith(suffixes):
                continue
            file_path = os.path.join(dirpath, filename)
            if matcher is not None and matcher.is_ignored(file_path, is_dir=False):
                logger.debug(f"Skipping {file_path} (matched gitignore pattern)")
                continue
            files.append(Path(file_path))

    return sorted(files)


def read_source_file(path: Path) -> Optional[str]:
    """Read a source file, returning None (and logging) if it cannot be read."""
    try:
        with open(path, "r", encoding="utf-8-sig", errors="replace") as f:
            return f.read()
    except OSError as e:
        logger.warning(f"Skipping unreadable file {path}: {e}")
        return None


def extract_localizer_keys(content: str) -> Set[str]:
    """
    Extract the unique keys used with @Localizer["..."] or _localizer["..."].

    Both call styles are matched case-insensitively. Empty keys are ignored
    because a .resx entry cannot have an empty name. Keys holding characters
    that XML cannot store are skipped with a warning.
    """
    keys: Set[str] = set()
    for match in LOCALIZER_PATTERN.finditer(content):
        key = match.group(1) if match.group(1) is not None else match.group(2)
        if not key:
            continue
        if not is_xml_compatible(key):
            logger.warning(f"Skipping localizer key {key!r}: not valid in XML")
            continue
        keys.add(key)
    return keys


def extract_data_annotations(content: str) -> List[Tuple[str, str]]:
    """
    Extract (resource type, key) pairs from validation attributes such as
    [Required(ErrorMessageResourceType = typeof(X), ErrorMessageResourceName = "Key")].
    """
    pairs = []
    for match in DATA_ANNOTATION_PATTERN.finditer(content):
        resource_type = match.group(1).strip()
        key = match.group(2).strip()
        if not resource_type or not key:
            logger.debug(f"Skipping blank data annotation: {match.group(0)!r}")
            continue
        if not (is_xml_compatible(resource_type) and is_xml_compatible(key)):
            logger.warning(
                f"Skipping data annotation {resource_type!r} / {key!r}: "
                "not valid in XML"
            )
            continue
        pairs.append((resource_type, key))
    return pairs


class DataAnnotationIndex:
    """
    Data annotation keys collected across the whole solution, grouped by
    project folder and resource type. Keys are only ever added.
    """

    def __init__(self) -> None:
        self.entries: Dict[str, Dict[str, Set[str]]] = defaultdict(
            lambda: defaultdict(set)
        )

    def add(self, project: str, resource_type: str, key: str) -> None:
        self.entries[project][resource_type].add(key)

    def items(self) -> Iterator[Tuple[str, str, List[str]]]:
        """Yield (project, resource type, sorted keys) in a stable order."""
        for project in sorted(self.entries):
            resource_types = self.entries[project]
            for resource_type in sorted(resource_types):
                yield project, resource_type, sorted(resource_types[resource_type])

    def __len__(self) -> int:
        return sum(
            len(keys)
            for resource_types in self.entries.values()
            for keys in resource_types.values()
        )


# ------------------------------------------------------------------------------
# Output Path Resolution
# ------------------------------------------------------------------------------


def split_relative_path(relative_path: Path) -> Tuple[str, List[str], str]:
    """
    Split a source file path (relative to the scan root) into its project
    folder, the folders between the project and the file, and the file's base name.

    Example: "Web/Views/Home/Index.cshtml" -> ("Web", ["Views", "Home"], "Index")

    Files directly in the scan root belong to the "" project.
    """
    parts = Path(relative_path).parts
    base_name = Path(parts[-1]).stem
    if len(parts) == 1:
        return "", [], base_name
    return parts[0], list(parts[1:-1]), base_name


def resx_file_name(base_name: str, language: str) -> str:
    """Return 'Base.resx' for the neutral language and 'Base.<lang>.resx' otherwise."""
    if language == NEUTRAL_LANGUAGE:
        return f"{base_name}.resx"
    return f"{base_name}.{language}.resx"


def project_resources_dir(output_path, project: str, subdirectories: Sequence[str]) -> Path:
    """Return <output>/<project>/Resources/<subdirectories...>."""
    resources_dir = Path(output_path)
    if project:
        resources_dir = resources_dir / project
    return resources_dir.joinpath(RESOURCES_FOLDER, *subdirectories)


def resolve_resource_type(resource_type: str) -> Tuple[List[str], str]:
    """
    Map a fully-qualified resource type to its folder and base name.

    The namespace segments after "Resources" (excluding the last one) become
    subfolders; the last segment is the .resx base name.

    Example: "MyApp.Resources.Errors.Messages" -> (["Errors"], "Messages")

    Raises:
        InvalidResourceTypeError: If "Resources" is missing or is the last segment
    """
    type_parts = [part.strip() for part in resource_type.split(".")]
    try:
        resources_index = type_parts.index(RESOURCES_FOLDER)
    except ValueError:
        raise InvalidResourceTypeError(
            f"Invalid resource type: {resource_type} (no '{RESOURCES_FOLDER}' namespace segment)"
        ) from None

    if resources_index >= len(type_parts) - 1:
        raise InvalidResourceTypeError(
            f"Invalid resource type: {resource_type} (no type name after '{RESOURCES_FOLDER}')"
        )

    return type_parts[resources_index + 1 : -1], type_parts[-1]


# ------------------------------------------------------------------------------
# ResX Documents
# ------------------------------------------------------------------------------


def _create_resx_parser() -> etree.XMLParser:
    """Return an XML parser configured to avoid external entity resolution."""
    return etree.XMLParser(
        remove_blank_text=True,
        resolve_entities=False,
        no_network=True,
        load_dtd=False,
    )


def create_resx_root():
    """Create a <root> element with the standard schema and resheader entries."""
    root = etree.Element("root")
    root.append(etree.fromstring(RESX_SCHEMA, _create_resx_parser()))

    for name, value in RESX_HEADERS:
        header = etree.SubElement(root, "resheader", name=name)
        etree.SubElement(header, "value").text = value

    return root


class ResxDocument:
    """
    A .resx file loaded into memory.

    Entries are only ever appended; existing elements, including ones this
    tool did not write, are kept as they are.
    """

    def __init__(self, path: Path, root, created: bool = False) -> None:
        self.path: Path = Path(path)
        self.root = root
        self.created: bool = created
        self.modified: bool = False
        # Set when an unreadable file is replaced; copied aside on save
        self.backup_path: Optional[Path] = None

    @classmethod
    def create(cls, path) -> "ResxDocument":
        return cls(path, create_resx_root(), created=True)

    @classmethod
    def load_or_create(cls, path) -> "ResxDocument":
        """
        Load an existing .resx file, or create a new one if it does not exist.

        An existing file that is not well-formed XML is replaced with a fresh
        document. The broken file is copied to '<name>.bak' when the new
        document is saved, so loading alone never writes anything.
        """
        path = Path(path)
        if not path.exists():
            logger.debug(f"Creating new resource file {path}")
            return cls.create(path)

        try:
            tree = etree.parse(str(path), _create_resx_parser())
        except etree.XMLSyntaxError as pe:
            backup_path = path.with_name(path.name + ".bak")
            logger.error(f"XML parse error in {path}: {pe}")
            logger.warning(
                f"Recreating {path}. The unreadable original will be saved as "
                f"{backup_path}; manual edits in it are not carried over."
            )
            document = cls.create(path)
            document.backup_path = backup_path
            return document

        logger.debug(f"Loaded existing resource file {path}")
        return cls(path, tree.getroot())

    def entry_names(self) -> Set[str]:
        return {
            elem.get("name") for elem in self.root.iter("data") if elem.get("name")
        }

    def entries(self) -> Dict[str, Optional[str]]:
        """Return a name -> value mapping of all data entries."""
        values = {}
        for elem in self.root.iter("data"):
            name = elem.get("name")
            if name:
                value = elem.find("value")
                values[name] = value.text if value is not None else None
        return values

    def has_codegen_metadata(self) -> bool:
        return any(
            elem.get("name") == CODEGEN_METADATA_NAME
            for elem in self.root.findall("metadata")
        )

    def ensure_codegen_metadata(self) -> None:
        """
        Add the PublicResXFileCodeGenerator metadata element if missing.

        It is placed right after the last resheader, or after the schema when
        there are no headers.
        """
        if self.has_codegen_metadata():
            return

        metadata = etree.Element(
            "metadata", name=CODEGEN_METADATA_NAME, type=CODEGEN_METADATA_TYPE
        )
        etree.SubElement(metadata, "value").text = CODEGEN_METADATA_VALUE

        headers = self.root.findall("resheader")
        if headers:
            headers[-1].addnext(metadata)
        elif len(self.root):
            self.root[0].addnext(metadata)
        else:
            self.root.append(metadata)

        self.modified = True
        logger.debug(f"Added {CODEGEN_METADATA_NAME} metadata to {self.path}")

    def add_entry(self, name: str, value: str) -> None:
        """Append a <data> entry. The caller guarantees the name is new."""
        data = etree.SubElement(self.root, "data", {"name": name, XML_SPACE: "preserve"})
        etree.SubElement(data, "value").text = value
        self.modified = True

    def save(self) -> None:
        """Write the document to its path, creating parent folders as needed."""
        self.path.parent.mkdir(parents=True, exist_ok=True)

        if self.backup_path is not None and self.path.exists():
            shutil.copyfile(self.path, self.backup_path)
            logger.info(f"Saved unreadable original as {self.backup_path}")
        self.backup_path = None

        xml_bytes = etree.tostring(
            self.root.getroottree(),
            encoding="utf-8",
            xml_declaration=True,
            pretty_print=True,
        )
        content = xml_bytes.decode("utf-8")
        # Standardize the XML declaration format
        content = re.sub(
            r"<\?xml version=['\"]1\.0['\"] encoding=['\"]utf-8['\"]\?>",
            '<?xml version="1.0" encoding="utf-8"?>',
            content,
            count=1,
            flags=re.IGNORECASE,
        )

        with open(self.path, "w", encoding="utf-8", newline="\n") as f:
            f.write(content)

        logger.info(f"Updated resource file: {self.path}")
        self.created = False
        self.modified = False


# ------------------------------------------------------------------------------
# Merging & Translation
# ------------------------------------------------------------------------------


def needs_translation(language: str, source_language: str) -> bool:
    """The neutral and source languages keep the formatted key as their value."""
    if language == NEUTRAL_LANGUAGE:
        return False
    return language.lower() != source_language.lower()


def merge_keys(
    document: ResxDocument,
    keys,
    language: str,
    source_language: str = DEFAULT_SOURCE_LANGUAGE,
    translator: Optional[Translator] = None,
) -> List[Dict[str, str]]:
    """
    Append entries for keys that the document does not contain yet.

    Keys are processed in sorted order. Each new entry gets the formatted key
    as its value, translated for languages other than the neutral and source
    language when a translator is given. A failed translation falls back to
    the formatted key, as does a translation XML cannot store. Existing
    entries are left untouched.

    Args:
        document: The document to merge into
        keys: Iterable of localization keys
        language: Culture suffix of the document
        source_language: Language of the formatted keys
        translator: Optional translator for new entries

    Returns:
        One dictionary per added entry with key, source and translation
    """
    existing_names = document.entry_names()
    added: List[Dict[str, str]] = []

    for key in sorted(set(keys)):
        if key in existing_names:
            continue
        if not is_xml_compatible(key):
            logger.warning(f"Skipping key {key!r} for {document.path}: not valid in XML")
            continue

        source_text = format_localizer_key(key)
        value = source_text

        if translator is not None and needs_translation(language, source_language):
            result = translator.translate(source_text, source_language, language)
            if result.ok and not is_xml_compatible(result.text):
                logger.warning(
                    f"Keeping untranslated text for '{key}' [{language}]: "
                    "translation is not valid in XML"
                )
            elif result.ok:
                value = result.text
            else:
                logger.warning(
                    f"Keeping untranslated text for '{key}' [{language}]: {result.error}"
                )

        document.add_entry(key, value)
        existing_names.add(key)
        added.append({"key": key, "source": source_text, "translation": value})

    return added


def generate_resource_files(
    resources_dir: Path,
    base_name: str,
    keys,
    settings: GeneratorSettings,
    translator: Optional[Translator],
    translation_log: dict,
) -> None:
    """
    Merge keys into <resources_dir>/<base_name>[.<lang>].resx for every language.

    Languages are processed one after another and every translation completes
    before the next key is handled, so each file has a single writer.
    """
    try:
        resource_label = Path(
            os.path.relpath(resources_dir / base_name, settings.output_path)
        ).as_posix()
    except ValueError:
        # Different drives on Windows
        resource_label = (resources_dir / base_name).as_posix()

    for language in settings.languages:
        path = resources_dir / resx_file_name(base_name, language)
        document = ResxDocument.load_or_create(path)

        if language == NEUTRAL_LANGUAGE:
            document.ensure_codegen_metadata()

        added = merge_keys(
            document,
            keys,
            language,
            settings.source_language,
            None if settings.dry_run else translator,
        )

        if added:
            translation_log.setdefault(resource_label, {})[language] = added
            logger.debug(
                f"{len(added)} new entries for {path}: "
                f"{', '.join(entry['key'] for entry in added)}"
            )

        if settings.dry_run:
            continue
        if document.created or document.modified:
            document.save()


def process_source_file(
    file_path: Path,
    settings: GeneratorSettings,
    translator: Optional[Translator],
    annotation_index: DataAnnotationIndex,
    translation_log: dict,
) -> DataAnnotationIndex:
    """
    Extract keys from one source file.

    Localizer keys are merged into the file's own resources right away. Data
    annotation keys are added to the index, which is returned for the final
    resource type pass.
    """
    content = read_source_file(file_path)
    if content is None:
        return annotation_index

    relative_path = Path(os.path.relpath(file_path, settings.source_path))
    project, subdirectories, base_name = split_relative_path(relative_path)

    for resource_type, key in extract_data_annotations(content):
        annotation_index.add(project, resource_type, key)

    keys = extract_localizer_keys(content)
    if not keys:
        return annotation_index

    logger.debug(f"Found {len(keys)} localizer keys in {relative_path}")
    generate_resource_files(
        project_resources_dir(settings.output_path, project, subdirectories),
        base_name,
        keys,
        settings,
        translator,
        translation_log,
    )
    return annotation_index


def generate_data_annotation_resources(
    annotation_index: DataAnnotationIndex,
    settings: GeneratorSettings,
    translator: Optional[Translator],
    translation_log: dict,
) -> None:
    """Write the resource files referenced by data annotation attributes."""
    for project, resource_type, keys in annotation_index.items():
        try:
            subdirectories, base_name = resolve_resource_type(resource_type)
        except InvalidResourceTypeError as e:
            logger.warning(str(e))
            continue

        generate_resource_files(
            project_resources_dir(settings.output_path, project, subdirectories),
            base_name,
            keys,
            settings,
            translator,
            translation_log,
        )


def _generate_summary(translation_log: dict) -> None:
    """Log the keys added per language."""
    if not translation_log:
        logger.info("No new resource entries needed")
        return

    added_per_language: Dict[str, Set[str]] = {}
    for languages in translation_log.values():
        for language, entries in languages.items():
            added_per_language.setdefault(language, set()).update(
                entry["key"] for entry in entries
            )

    for language in sorted(added_per_language):
        keys = added_per_language[language]
        logger.info(
            f"Language '{get_language_name(language)}': "
            f"{len(keys)} keys added: {', '.join(sorted(keys))}"
        )


def run_generator(
    settings: GeneratorSettings, translator: Optional[Translator] = None
) -> dict:
    """
    Run one full pass: scan, merge localizer keys per file, then merge data
    annotation keys per resource type.

    Returns:
        translation_log mapping resource labels to per-language added entries

    Raises:
        SourceScanError: If the source root cannot be scanned
    """
    files = find_source_files(
        settings.source_path, settings.extensions, settings.ignore_folders
    )
    logger.info(f"Found {len(files)} source files to scan")

    translation_log: dict = {}
    annotation_index = DataAnnotationIndex()

    for file_path in files:
        annotation_index = process_source_file(
            file_path, settings, translator, annotation_index, translation_log
        )

    logger.info(f"Collected {len(annotation_index)} data annotation keys")
    generate_data_annotation_resources(
        annotation_index, settings, translator, translation_log
    )

    _generate_summary(translation_log)
    return translation_log


# ------------------------------------------------------------------------------
# Report
# ------------------------------------------------------------------------------


def _escape_table_cell(text: str) -> str:
    return (text or "").replace("\n", " ").replace("|", "\\|")


def create_translation_report(translation_log: dict) -> str:
    """
    Render the entries added during a run as a Markdown report.
    """
    report = "# Translation Report\n\n"

    if not translation_log:
        return report + "No new resource entries were added."

    for resource_label in sorted(translation_log):
        languages = translation_log[resource_label]
        report += f"## Resource: {resource_label}\n\n"

        for language in sorted(languages):
            report += f"### Language: {get_language_name(language)}\n\n"
            report += "| Key | Source Text | Translated Text |\n"
            report += "| --- | ----------- | --------------- |\n"
            for entry in languages[language]:
                report += (
                    f"| {_escape_table_cell(entry['key'])} "
                    f"| {_escape_table_cell(entry['source'])} "
                    f"| {_escape_table_cell(entry['translation'])} |\n"
                )
            report += "\n"

    return report


# ------------------------------------------------------------------------------
# Main Entry Point
# ------------------------------------------------------------------------------


def prompt_for_path(message: str) -> str:
    """Ask for a path on the console. Returns "" when nothing was entered."""
    print(message)
    try:
        answer = input()
    except EOFError:
        return ""
    return answer.strip().strip('"').strip()


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="ResX Localization Generator")
    parser.add_argument(
        "source_path",
        nargs="?",
        default=None,
        help="Path to the solution to scan (prompted for when omitted)",
    )
    parser.add_argument(
        "-o",
        "--output-path",
        default=None,
        help="Root folder for generated .resx files (prompted for when omitted; "
        "empty answer uses the source path)",
    )
    parser.add_argument(
        "--languages",
        default=",".join(DEFAULT_LANGUAGES),
        help="Comma separated culture suffixes to generate besides the neutral "
        f"resource (default: {','.join(DEFAULT_LANGUAGES)})",
    )
    parser.add_argument(
        "--source-language",
        default=DEFAULT_SOURCE_LANGUAGE,
        help=f"Language the keys are written in (default: {DEFAULT_SOURCE_LANGUAGE})",
    )
    parser.add_argument(
        "--extensions",
        default=",".join(DEFAULT_EXTENSIONS),
        help="Comma separated file name suffixes to scan "
        f"(default: {','.join(DEFAULT_EXTENSIONS)})",
    )
    parser.add_argument(
        "--ignore-folders",
        default="",
        help="Comma separated list of folder names to ignore during scanning. "
        "If empty, .gitignore patterns will be used instead.",
    )
    parser.add_argument(
        "--translator",
        choices=[provider.value for provider in TranslationProvider],
        default=TranslationProvider.MYMEMORY.value,
        help="Translation provider for new entries (default: mymemory)",
    )
    parser.add_argument(
        "--model",
        default=DEFAULT_LLM_MODEL,
        help=f"Model to use with the openai/openrouter translators (default: {DEFAULT_LLM_MODEL})",
    )
    parser.add_argument(
        "--api-key",
        default=None,
        help="API key for the openai/openrouter translators "
        "(defaults to OPENAI_API_KEY / OPENROUTER_API_KEY)",
    )
    parser.add_argument(
        "--mymemory-email",
        default=None,
        help="Contact email sent to MyMemory for a higher daily quota",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=DEFAULT_TIMEOUT,
        help=f"Timeout in seconds for each MyMemory request (default: {DEFAULT_TIMEOUT:g})",
    )
    parser.add_argument(
        "-d",
        "--dry-run",
        action="store_true",
        help="Only report the entries that would be added, without translating or writing",
    )
    parser.add_argument(
        "-l",
        "--log-trace",
        action="store_true",
        help="Log detailed trace information",
    )
    return parser


def _api_key_from_environment(provider: str) -> Optional[str]:
    if provider == TranslationProvider.OPENROUTER.value:
        return os.environ.get("OPENROUTER_API_KEY") or os.environ.get("OPENAI_API_KEY")
    if provider == TranslationProvider.OPENAI.value:
        return os.environ.get("OPENAI_API_KEY")
    return None


def main(argv: Optional[List[str]] = None) -> None:
    """
    Main entry point for the ResX Localization Generator.
    Reads settings from command-line arguments or GitHub Actions inputs,
    prompts for missing paths, generates the resource files and prints a report.
    """
    is_github = os.environ.get("GITHUB_ACTIONS", "false").lower() == "true"
    if is_github:
        source_path = os.environ.get("INPUT_SOURCE_PATH", "").strip()
        output_path = os.environ.get("INPUT_OUTPUT_PATH", "").strip() or source_path
        languages = parse_languages(
            os.environ.get("INPUT_LANGUAGES", ",".join(DEFAULT_LANGUAGES))
        )
        source_language = os.environ.get(
            "INPUT_SOURCE_LANGUAGE", DEFAULT_SOURCE_LANGUAGE
        ).strip()
        extensions = parse_extensions(os.environ.get("INPUT_EXTENSIONS"))
        ignore_folders_input = os.environ.get("INPUT_IGNORE_FOLDERS", "")
        translator_name = os.environ.get(
            "INPUT_TRANSLATOR", TranslationProvider.MYMEMORY.value
        ).lower()
        model = os.environ.get("INPUT_MODEL", DEFAULT_LLM_MODEL)
        api_key = _api_key_from_environment(translator_name)
        email = os.environ.get("INPUT_MYMEMORY_EMAIL") or None
        dry_run = os.environ.get("INPUT_DRY_RUN", "false").lower() == "true"
        log_trace = os.environ.get("INPUT_LOG_TRACE", "false").lower() == "true"
        timeout_raw = os.environ.get("INPUT_TIMEOUT", str(DEFAULT_TIMEOUT))
        try:
            timeout = float(timeout_raw)
        except ValueError:
            print(
                f"Invalid INPUT_TIMEOUT value ('{timeout_raw}'); falling back to "
                f"{DEFAULT_TIMEOUT:g}"
            )
            timeout = DEFAULT_TIMEOUT
        startup_message_prefix = "Running with parameters from environment variables."
    else:
        args = build_arg_parser().parse_args(argv)
        source_path = args.source_path
        output_path = args.output_path
        languages = parse_languages(args.languages)
        source_language = args.source_language.strip()
        extensions = parse_extensions(args.extensions)
        ignore_folders_input = args.ignore_folders
        translator_name = args.translator
        model = args.model
        api_key = args.api_key or _api_key_from_environment(translator_name)
        email = args.mymemory_email
        dry_run = args.dry_run
        log_trace = args.log_trace
        timeout = args.timeout
        # Don't print args because they may contain the API key
        startup_message_prefix = "Running with command-line parameters."

    ignore_folders = [
        folder.strip() for folder in ignore_folders_input.split(",") if folder.strip()
    ]

    configure_logging(log_trace)

    if not source_path:
        source_path = prompt_for_path("Enter the project path:")
    if not source_path:
        print("Error: no project path provided.")
        sys.exit(1)
    if output_path is None:
        output_path = prompt_for_path("Enter the output path for .resx files:")
    if not output_path:
        output_path = source_path

    print(
        f"{startup_message_prefix} Source Path: {source_path}, Output Path: {output_path}, "
        f"Languages: {languages}, Source Language: {source_language}, "
        f"Extensions: {list(extensions)}, Ignore Folders: {ignore_folders}, "
        f"Translator: {translator_name}, Dry Run: {dry_run}, Log Trace: {log_trace}"
    )

    for language in languages:
        if not is_known_language(language):
            logger.warning(f"Unknown culture '{language}'; generating it anyway")

    translator = None
    if not dry_run:
        try:
            translator_config = TranslatorConfig(
                provider=translator_name,
                api_key=api_key,
                model=model,
                email=email,
                timeout=timeout,
            )
        except ValueError as e:
            logger.error(f"Error creating translator configuration: {e}")
            if translator_name in (
                TranslationProvider.OPENAI.value,
                TranslationProvider.OPENROUTER.value,
            ) and not api_key:
                env_var_name = (
                    "OPENROUTER_API_KEY"
                    if translator_name == TranslationProvider.OPENROUTER.value
                    else "OPENAI_API_KEY"
                )
                print(
                    f"Set {env_var_name} or pass --api-key, or use "
                    "--translator mymemory / --dry-run."
                )
            sys.exit(1)
        translator = create_translator(translator_config)

    settings = GeneratorSettings(
        source_path=Path(source_path),
        output_path=Path(output_path),
        languages=languages,
        source_language=source_language,
        extensions=extensions,
        ignore_folders=ignore_folders,
        dry_run=dry_run,
    )

    try:
        translation_log = run_generator(settings, translator)
    except SourceScanError as e:
        logger.error(f"Error: {e}")
        sys.exit(1)

    report_output = create_translation_report(translation_log)

    if "GITHUB_OUTPUT" in os.environ:
        with open(os.environ["GITHUB_OUTPUT"], "a", encoding="utf-8") as f:
            # Use a unique delimiter to prevent collision if translations contain "EOF"
            delimiter = "EOF_TRANSLATION_REPORT_5c1f3e2b"
            print(f"translation_report<<{delimiter}", file=f)
            print(report_output, file=f)
            print(delimiter, file=f)
    else:
        print("\nDry Run Report:" if dry_run else "\nTranslation Report:")
        print(report_output)


if __name__ == "__main__":
    main()
