"""
test_options.py
---------------
Unit tests for ParseOptions construction and validation.
"""
from datetime import date

import pytest
from oneiro.core.exceptions import ParseOptionsError, ValidationError
from oneiro.pipeline.options import ParseOptions, is_source_path


class TestDefaults:
    """Test default values and construction checks."""

    def test_defaults(self):
        opts = ParseOptions()
        assert opts.callout_type == "dream"
        assert opts.validate is True
        assert opts.include_nested is False
        assert opts.sanitize is True
        assert opts.strict is False
        assert opts.transactional is False
        assert opts.max_content_length == 500_000
        assert opts.max_matches == 1000

    @pytest.mark.parametrize("callout_type", ["", "   ", "dre am", "dream]", "a|b"])
    def test_bad_callout_type(self, callout_type):
        with pytest.raises(ParseOptionsError):
            ParseOptions(callout_type=callout_type)

    def test_hyphenated_type(self):
        assert ParseOptions(callout_type="dream-log").callout_type == "dream-log"

    @pytest.mark.parametrize("value", [0, -5, True, "100"])
    def test_bad_limits(self, value):
        with pytest.raises(ParseOptionsError):
            ParseOptions(max_content_length=value)

    def test_error_is_validation_error(self):
        """Option errors are validation errors."""
        with pytest.raises(ValidationError):
            ParseOptions(max_matches=0)

    def test_frozen(self):
        with pytest.raises(AttributeError):
            ParseOptions().strict = True


class TestFromArgs:
    """Test the positional convention."""

    def test_type(self):
        assert ParseOptions.from_args("memory").callout_type == "memory"

    @pytest.mark.parametrize("path", ["notes/a.md", "notes\\a.md"])
    def test_path(self, path):
        opts = ParseOptions.from_args(path)
        assert opts.source_path == path
        assert opts.callout_type == "dream"

    def test_explicit_source_wins(self):
        opts = ParseOptions.from_args("memory", "x/y.md")
        assert opts.callout_type == "memory"
        assert opts.source_path == "x/y.md"

    def test_is_source_path(self):
        assert is_source_path("a/b")
        assert not is_source_path("dream")


class TestFromDict:
    """Test mapping construction."""

    def test_camel_case(self):
        opts = ParseOptions.from_dict({"includeNested": True, "maxContentLength": 10})
        assert opts.include_nested is True
        assert opts.max_content_length == 10

    def test_aliases(self):
        opts = ParseOptions.from_dict({"markerType": "memory", "source": "a.md"})
        assert opts.callout_type == "memory"
        assert opts.source_path == "a.md"

    def test_coercion(self):
        opts = ParseOptions.from_dict({"strict": "yes", "max_matches": "50"})
        assert opts.strict is True
        assert opts.max_matches == 50

    def test_none_means_default(self):
        assert ParseOptions.from_dict({"validate": None}).validate is True

    def test_fallback_date_string(self):
        opts = ParseOptions.from_dict({"fallback_date": "2024-06-01"})
        assert opts.fallback_date == date(2024, 6, 1)

    def test_bad_fallback_date(self):
        with pytest.raises(ParseOptionsError):
            ParseOptions.from_dict({"fallback_date": "June 1"})

    def test_unknown_key(self):
        with pytest.raises(ParseOptionsError, match="Unknown parse option"):
            ParseOptions.from_dict({"colour": "blue"})

    def test_bad_bool(self):
        with pytest.raises(ParseOptionsError):
            ParseOptions.from_dict({"strict": "maybe"})

    def test_bad_int(self):
        with pytest.raises(ParseOptionsError):
            ParseOptions.from_dict({"max_matches": "lots"})


class TestFromYaml:
    """Test YAML loading."""

    def test_load(self, tmp_dir):
        path = tmp_dir / "opts.yaml"
        path.write_text("callout_type: memory\ninclude_nested: true\nfallback_date: 2024-06-01\n")
        opts = ParseOptions.from_yaml(path)

        assert opts.callout_type == "memory"
        assert opts.include_nested is True
        assert opts.fallback_date == date(2024, 6, 1)

    def test_overrides_win(self, tmp_dir):
        path = tmp_dir / "opts.yaml"
        path.write_text("callout_type: memory\nstrict: false\n")
        opts = ParseOptions.from_yaml(path, strict=True, callout_type=None)

        assert opts.strict is True
        assert opts.callout_type == "memory"

    def test_empty_file(self, tmp_dir):
        path = tmp_dir / "opts.yaml"
        path.write_text("")
        assert ParseOptions.from_yaml(path) == ParseOptions()

    def test_not_a_mapping(self, tmp_dir):
        path = tmp_dir / "opts.yaml"
        path.write_text("- a\n- b\n")
        with pytest.raises(ParseOptionsError, match="mapping"):
            ParseOptions.from_yaml(path)

    def test_invalid_yaml(self, tmp_dir):
        path = tmp_dir / "opts.yaml"
        path.write_text("callout_type: [unclosed\n")
        with pytest.raises(ParseOptionsError, match="Invalid YAML"):
            ParseOptions.from_yaml(path)


class TestHelpers:
    def test_replace_revalidates(self):
        opts = ParseOptions()
        assert opts.replace(strict=True).strict is True
        with pytest.raises(ParseOptionsError):
            opts.replace(callout_type="")

    def test_to_dict(self):
        data = ParseOptions(fallback_date=date(2024, 1, 2)).to_dict()
        assert data["fallback_date"] == "2024-01-02"
        assert data["callout_type"] == "dream"
