#!/usr/bin/env python3
"""
Tests for language utilities in ResxLocalizationGenerator.

This module tests the handling of .NET culture codes, particularly the
get_language_name function used in reports.
"""
import os
import sys
import unittest

# Add parent directory to path for module import
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from language_utils import get_language_name, is_known_language


class TestLanguageUtils(unittest.TestCase):
    """Tests for language utility functions."""

    def test_get_language_name_known_language(self):
        """Test getting names for known languages."""
        self.assertEqual(get_language_name("en"), "English")
        self.assertEqual(get_language_name("tr"), "Turkish")
        self.assertEqual(get_language_name("de"), "German")
        self.assertEqual(get_language_name("ja"), "Japanese")

    def test_get_language_name_with_region(self):
        """Test getting names for .NET culture names with a region."""
        self.assertEqual(get_language_name("en-US"), "English (United States)")
        self.assertEqual(get_language_name("pt-BR"), "Portuguese (Brazil)")
        self.assertEqual(get_language_name("de-DE"), "German (Germany)")

    def test_get_language_name_neutral(self):
        """The neutral culture has no code."""
        self.assertEqual(get_language_name(""), "Neutral")

    def test_get_language_name_unknown_language(self):
        """Unknown cultures return their code."""
        self.assertEqual(get_language_name("xx"), "xx")
        self.assertEqual(get_language_name("custom-lang"), "custom-lang")

    def test_is_known_language(self):
        self.assertTrue(is_known_language(""))
        self.assertTrue(is_known_language("tr"))
        self.assertTrue(is_known_language("en-GB"))
        self.assertFalse(is_known_language("xx"))
        self.assertFalse(is_known_language("custom-lang"))


if __name__ == "__main__":
    unittest.main()
