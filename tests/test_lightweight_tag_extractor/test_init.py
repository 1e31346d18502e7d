"""Test module for lightweight_tag_extractor package initialization."""


def test_package_import() -> None:
    """Test that the package can be imported successfully."""
    # Arrange & Act
    import lightweight_tag_extractor

    # Assert
    assert lightweight_tag_extractor is not None


def test_package_has_version() -> None:
    """Test that the package has a version attribute."""
    # Arrange & Act
    import lightweight_tag_extractor

    # Assert
    assert isinstance(lightweight_tag_extractor.__version__, str)
    assert lightweight_tag_extractor.__version__ == "0.1.0"


def test_package_has_author() -> None:
    """Test that the package has an author attribute."""
    # Arrange & Act
    import lightweight_tag_extractor

    # Assert
    assert lightweight_tag_extractor.__author__ == "Lightweight Tag Extractor Team"


def test_level_one_exports() -> None:
    """Test that the simple functions are exported at package level."""
    # Arrange & Act
    import lightweight_tag_extractor

    # Assert
    for name in ["scan_tags", "scan_first_tag", "parse_attributes",
                 "get_attribute", "locate_pivot", "TagExtractor"]:
        assert name in lightweight_tag_extractor.__all__
        assert callable(getattr(lightweight_tag_extractor, name))
