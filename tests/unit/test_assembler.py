"""Unit tests for tagged blocks and input assembly."""

from sirecoder.context.blocks import TaggedBlock, dir_block, file_block
from sirecoder.prompts.assembler import FIX_REQUEST, NO_ERRORS, assemble, repair_input


class TestBlocks:
    """Tests for tagged block rendering."""

    def test_render_plain(self) -> None:
        assert TaggedBlock("REQUEST", "add a case").render() == "<REQUEST>\nadd a case\n</REQUEST>"

    def test_file_block_with_mode(self) -> None:
        block = file_block("/src/tab.sire", "^-^ tabLen", mode="exports")

        assert block == '<FILE path="/src/tab.sire" mode="exports">\n^-^ tabLen\n</FILE>'

    def test_current_file_flag(self) -> None:
        assert file_block("a.sire", "= a 1", current=True) == (
            '<FILE path="a.sire" current>\n= a 1\n</FILE>'
        )

    def test_dir_block(self) -> None:
        assert dir_block("/src", "a.sire\nb.sire") == '<DIR path="/src">\na.sire\nb.sire\n</DIR>'


class TestAssemble:
    """Tests for initial input assembly."""

    def test_without_dependencies_or_check(self) -> None:
        result = assemble("a.sire", "= a 1", "rename a to b")

        assert result == (
            '<FILE path="a.sire" current>\n= a 1\n</FILE>\n\n<REQUEST>\nrename a to b\n</REQUEST>'
        )

    def test_section_order(self) -> None:
        deps = '<FILE path="b.sire">\nX\n</FILE>'

        result = assemble("a.sire", "= a 1", "go", deps, "line 1: bad")

        assert result.index(deps) < result.index("<FILE path=\"a.sire\" current>")
        assert result.index("current>") < result.index("<REQUEST>")
        assert result.endswith("<CHECK>\nline 1: bad\n</CHECK>")

    def test_clean_check_says_no_errors(self) -> None:
        result = assemble("a.sire", "= a 1", "go", check_text="")

        assert result.endswith(f"<CHECK>\n{NO_ERRORS}\n</CHECK>")

    def test_check_disabled_has_no_check_block(self) -> None:
        assert "<CHECK>" not in assemble("a.sire", "= a 1", "go", check_text=None)


def test_repair_input() -> None:
    result = repair_input("/src/Main.hs", "main = ", "line 4: unexpected token")

    assert result == "\n\n".join(
        [
            '<FILE path="/src/Main.hs" current>\nmain = \n</FILE>',
            f"<REQUEST>\n{FIX_REQUEST}\n</REQUEST>",
            "<CHECK>\nline 4: unexpected token\n</CHECK>",
        ]
    )
