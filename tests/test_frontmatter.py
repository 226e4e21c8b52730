"""Tests for the frontmatter parser and glob extraction helpers."""

from dotti.analysis.frontmatter import parse_frontmatter, strip_quotes
from dotti.analysis.globs import FileIndex, extract_glob_patterns, is_unsafe


class TestParseFrontmatter:

    def test_fields_and_body(self) -> None:
        fm = parse_frontmatter("---\nname: Reviewer\ndescription: Review: code\n---\n# Body\ntext")
        assert fm.found
        assert fm.fields == {"name": "Reviewer", "description": "Review: code"}
        assert fm.body == "# Body\ntext"

    def test_no_frontmatter(self) -> None:
        fm = parse_frontmatter("# Just markdown\n")
        assert not fm.found
        assert fm.fields == {}
        assert fm.body == "# Just markdown\n"

    def test_unterminated_block(self) -> None:
        assert not parse_frontmatter("---\nname: x\nno closing line").found

    def test_lines_without_key_ignored(self) -> None:
        fm = parse_frontmatter("---\n: orphan\njust text\nglobs: **/*.ts\n---\n")
        assert fm.fields == {"globs": "**/*.ts"}

    def test_empty_value_kept_as_empty_string(self) -> None:
        assert parse_frontmatter("---\nname:\n---\nbody").fields == {"name": ""}


class TestGlobHelpers:

    def test_strip_quotes(self) -> None:
        assert strip_quotes('"**/*.ts"') == "**/*.ts"
        assert strip_quotes("'a'") == "a"
        assert strip_quotes('"unbalanced') == '"unbalanced'

    def test_extract_from_globs_and_apply_to(self) -> None:
        fields = {"globs": "**/*.ts, **/*.tsx", "applyTo": '"src/**/*.py,tests/**"', "name": "x"}
        assert extract_glob_patterns(fields) == ["**/*.ts", "**/*.tsx", "src/**/*.py", "tests/**"]

    def test_extract_ignores_empty(self) -> None:
        assert extract_glob_patterns({"globs": " , "}) == []

    def test_unsafe_patterns(self) -> None:
        assert is_unsafe("../secrets/*")
        assert is_unsafe("/etc/passwd")
        assert is_unsafe("C:\\Users\\*")
        assert not is_unsafe("src/**/*.ts")

    def test_file_index_resolves(self) -> None:
        index = FileIndex(["src/a.ts", "src/b.tsx", "README.md"])
        assert index.resolve_glob("**/*.ts") == ["src/a.ts"]
        assert index.resolve_glob("src/**") == ["src/a.ts", "src/b.tsx"]
        assert index.resolve_glob("**/*.rs") == []
