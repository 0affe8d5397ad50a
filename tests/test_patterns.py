"""Tests for metadata pattern matchers."""

from soundkeeper.core.formats import PluginFormat
from soundkeeper.discovery.patterns import (
    WAVES,
    decode_component_version,
    format_identifier_token,
    is_generic_folder,
    manufacturer_from_identifier,
    match_copyright_holder,
    match_directory_version,
    match_filename_version,
    match_leaf_version,
    match_resource_version,
    vendor_for_path,
)


class TestVersionPatterns:
    """Tests for version regular expressions."""

    def test_resource_version(self):
        """Test the ``Version: <n>`` line in resource files."""
        text = "Name: Old Delay\nVersion: 1.2.3\nBuild: 77\n"
        assert match_resource_version(text) == "1.2.3"

    def test_resource_version_without_space(self):
        assert match_resource_version("Version:4") == "4"

    def test_resource_version_trailing_dot(self):
        assert match_resource_version("Version: 2.0.") == "2.0"

    def test_resource_version_missing(self):
        assert match_resource_version("Build: 77") is None

    def test_filename_version(self):
        """Test dotted versions in leaf names."""
        assert match_filename_version("Comp 2.1") == "2.1"
        assert match_filename_version("Limiter v10.4.2 beta") == "10.4.2"

    def test_filename_version_needs_a_dot(self):
        """Test bare numbers are not versions."""
        assert match_filename_version("Pro-Q 3") is None

    def test_directory_version(self):
        """Test ``V<digits>`` markers in directory names."""
        assert match_directory_version("/Applications/Waves/Plug-Ins V14/Waves") == "14"

    def test_directory_version_nearest_leaf_wins(self):
        assert match_directory_version("/Vol/Backup V2/Plug-Ins V13/Waves") == "13"

    def test_directory_version_requires_word_boundary(self):
        """Test letters glued to the marker do not count."""
        assert match_directory_version("/Library/VST3") is None
        assert match_directory_version("/Applications/Waves/Plug-Ins/Waves") is None

    def test_leaf_version(self):
        assert match_leaf_version("API-2500 V12.5") == "12.5"
        assert match_leaf_version("SSLComp") is None


class TestCopyright:
    """Tests for copyright-notice parsing."""

    def test_holder_after_year(self):
        assert match_copyright_holder("Copyright 2021 Acme Audio. All rights reserved.") == "Acme Audio"

    def test_year_range(self):
        assert match_copyright_holder("© 2015-2023 Lumen Labs, Inc.") == "Lumen Labs"

    def test_no_year_returns_notice(self):
        assert match_copyright_holder("  (c) Acme Inc. ") == "(c) Acme Inc."

    def test_blank(self):
        assert match_copyright_holder("   ") is None


class TestIdentifier:
    """Tests for reverse-DNS identifier decomposition."""

    def test_second_segment_title_cased(self):
        assert manufacturer_from_identifier("com.acme.SuperComp") == "Acme"

    def test_separators_become_spaces(self):
        assert manufacturer_from_identifier("com.native-instruments.Massive") == "Native Instruments"
        assert format_identifier_token("sound_toys") == "Sound Toys"

    def test_existing_capitals_kept(self):
        assert format_identifier_token("FabFilter") == "FabFilter"

    def test_single_segment(self):
        assert manufacturer_from_identifier("SuperComp") is None

    def test_empty_segment(self):
        assert manufacturer_from_identifier("com..SuperComp") is None


class TestGenericFolders:
    """Tests for the generic-folder denylist."""

    def test_generic(self):
        for name in ("Components", "VST3", "vst", "Plug-Ins", "Application Support"):
            assert is_generic_folder(name)

    def test_vendor_folder(self):
        assert not is_generic_folder("FabFilter")


class TestComponentVersion:
    """Tests for Audio Unit integer versions."""

    def test_decode(self):
        assert decode_component_version(0x00020104) == "2.1.4"
        assert decode_component_version(0x000A0000) == "10.0.0"

    def test_zero_is_missing(self):
        assert decode_component_version(0) is None


class TestVendorConvention:
    """Tests for vendor path conventions."""

    def test_waves_paths(self):
        assert vendor_for_path("/Applications/Waves/Plug-Ins V14/Waves/SSLComp.bundle") is WAVES
        assert vendor_for_path("/Library/Audio/Plug-Ins/VST3/Waves SSLComp.vst3") is WAVES

    def test_other_paths(self):
        assert vendor_for_path("/Library/Audio/Plug-Ins/VST3/Pro-Q 3.vst3") is None

    def test_waves_defaults(self):
        assert WAVES.name == "Waves"
        assert WAVES.default_format is PluginFormat.VST
