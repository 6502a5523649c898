"""Tests for LinkRewriter via LinkUpdater.update_links_in_note."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from linksync.domain.models import Document, DocumentMetadata, Heading

if TYPE_CHECKING:
    from conftest import FakeVault

pytestmark = pytest.mark.asyncio

NOTE1 = Document("note1.md")


async def _update(fake_vault: FakeVault, **settings: object) -> int:
    return await fake_vault.updater(**settings).update_links_in_note(NOTE1)


# ---------------------------------------------------------------------------
# Markdown links
# ---------------------------------------------------------------------------


class TestMarkdownLinks:
    async def test_frontmatter_title(self, fake_vault: FakeVault) -> None:
        fake_vault.add("note1.md", "Here is a [link](note2.md)")
        fake_vault.add("note2.md", "---\ntitle: Front Matter Title\n---\n# New Title\n")

        assert await _update(fake_vault) == 1
        assert fake_vault.text("note1.md") == "Here is a [Front Matter Title](note2.md)"

    async def test_heading_title(self, fake_vault: FakeVault) -> None:
        fake_vault.add("note1.md", "Here is a [link](note2.md)")
        fake_vault.add("note2.md", "# Heading Title\n")

        assert await _update(fake_vault) == 1
        assert fake_vault.text("note1.md") == "Here is a [Heading Title](note2.md)"

    async def test_alias_match_kept(self, fake_vault: FakeVault) -> None:
        fake_vault.add("note1.md", "Here is a [World](note2.md)")
        fake_vault.add("note2.md", "---\ntitle: Dogs 1\naliases: [Hello, World]\n---\n")

        assert await _update(fake_vault) == 0
        assert fake_vault.text("note1.md") == "Here is a [World](note2.md)"
        assert fake_vault.store.writes == []

    async def test_checkbox_lines(self, fake_vault: FakeVault) -> None:
        fake_vault.add("note1.md", "[ ] [link](note2.md)\n[x] [another](note2.md)")
        fake_vault.add("note2.md", "---\ntitle: Different Title\n---\n")

        assert await _update(fake_vault) == 2
        assert fake_vault.text("note1.md") == (
            "[ ] [Different Title](note2.md)\n[x] [Different Title](note2.md)"
        )

    async def test_checkbox_with_spaces(self, fake_vault: FakeVault) -> None:
        fake_vault.add("note1.md", "  [ ]  [link](note2.md)")
        fake_vault.add("note2.md", "---\ntitle: Different Title\n---\n")

        assert await _update(fake_vault) == 1
        assert fake_vault.text("note1.md") == "  [ ]  [Different Title](note2.md)"

    async def test_same_document_anchor_ignored(self, fake_vault: FakeVault) -> None:
        text = "# Heading 1\n\nLink: [Heading 2](#heading-2)\n\n## Heading 2"
        fake_vault.add("note1.md", text)

        assert await _update(fake_vault) == 0
        assert fake_vault.text("note1.md") == text

    async def test_image_alt_text_untouched(self, fake_vault: FakeVault) -> None:
        text = "Here is an image: ![Custom Alt Text](cool-img.jpg)"
        fake_vault.add("note1.md", text)
        fake_vault.add("cool-img.jpg", "", metadata=DocumentMetadata())

        assert await _update(fake_vault) == 0
        assert fake_vault.text("note1.md") == text

    async def test_non_markdown_target_untouched(self, fake_vault: FakeVault) -> None:
        text = "See [old name](cool-img.jpg)"
        fake_vault.add("note1.md", text)
        fake_vault.add("cool-img.jpg", "", metadata=DocumentMetadata(frontmatter={"title": "X"}))

        assert await _update(fake_vault) == 0
        assert fake_vault.text("note1.md") == text

    async def test_url_encoded_target(self, fake_vault: FakeVault) -> None:
        fake_vault.add("note1.md", "[old](My%20Note.md)")
        fake_vault.add("My Note.md", "# Proper Title\n")

        assert await _update(fake_vault) == 1
        # the raw target is written back unchanged
        assert fake_vault.text("note1.md") == "[Proper Title](My%20Note.md)"

    async def test_fragment_is_ignored_for_resolution(self, fake_vault: FakeVault) -> None:
        fake_vault.add("note1.md", "[old](note2.md#intro)")
        fake_vault.add("note2.md", "# Title\n")

        assert await _update(fake_vault) == 1
        assert fake_vault.text("note1.md") == "[Title](note2.md#intro)"

    async def test_unresolved_target_untouched(self, fake_vault: FakeVault) -> None:
        fake_vault.add("note1.md", "[ghost](missing.md)")

        assert await _update(fake_vault) == 0

    async def test_target_without_metadata_untouched(self, fake_vault: FakeVault) -> None:
        fake_vault.add("note1.md", "[old](note2.md)")
        fake_vault.add("note2.md", "# Title\n", metadata=None)

        assert await _update(fake_vault) == 0

    async def test_stray_double_brackets(self, fake_vault: FakeVault) -> None:
        text = "[[  \n\n[Doggos](dogs.md)"
        fake_vault.add("note1.md", text)
        fake_vault.add("dogs.md", "---\ntitle: Doggos\n---\n")

        assert await _update(fake_vault) == 0
        assert fake_vault.text("note1.md") == text


# ---------------------------------------------------------------------------
# Wikilinks
# ---------------------------------------------------------------------------


class TestWikilinks:
    async def test_frontmatter_title(self, fake_vault: FakeVault) -> None:
        fake_vault.add("note1.md", "Here is a [[note2|link]]")
        fake_vault.add("note2.md", "---\ntitle: Front Matter Title\n---\n# New Title\n")

        assert await _update(fake_vault) == 1
        assert fake_vault.text("note1.md") == "Here is a [[note2|Front Matter Title]]"

    async def test_alias_match_kept(self, fake_vault: FakeVault) -> None:
        fake_vault.add("note1.md", "Here is a [[note2|World]]")
        fake_vault.add("note2.md", "---\ntitle: Dogs 1\naliases: [Hello, World]\n---\n")

        assert await _update(fake_vault) == 0
        assert fake_vault.text("note1.md") == "Here is a [[note2|World]]"

    async def test_subheading_with_display(self, fake_vault: FakeVault) -> None:
        fake_vault.add("note1.md", "Here is a [[note2#Subheading|link]]")
        fake_vault.add("note2.md", "---\ntitle: Front Matter Title\n---\n")

        assert await _update(fake_vault) == 0
        assert fake_vault.text("note1.md") == "Here is a [[note2#Subheading|link]]"

    async def test_subheading_without_display(self, fake_vault: FakeVault) -> None:
        fake_vault.add("note1.md", "Here is a [[note2#Section]]")
        fake_vault.add("note2.md", "---\ntitle: Different Title\n---\n")

        assert await _update(fake_vault) == 0
        assert fake_vault.text("note1.md") == "Here is a [[note2#Section]]"

    async def test_subheading_matching_heading(self, fake_vault: FakeVault) -> None:
        text = "Here is a [[note2#My Heading|My Heading]]"
        fake_vault.add("note1.md", text)
        fake_vault.add("note2.md", "---\ntitle: Page Title\n---\n# Different Title\n## My Heading\n")

        assert await _update(fake_vault) == 0
        assert fake_vault.text("note1.md") == text

    async def test_block_reference(self, fake_vault: FakeVault) -> None:
        text = "Here is a [[note2#^quote|old text]]"
        fake_vault.add("note1.md", text)
        fake_vault.add("note2.md", "---\ntitle: Page Title\n---\n")

        assert await _update(fake_vault) == 0
        assert fake_vault.text("note1.md") == text

    async def test_adds_display_when_title_differs(self, fake_vault: FakeVault) -> None:
        fake_vault.add("note1.md", "Here is a [[note2]]")
        fake_vault.add("note2.md", "---\ntitle: Different Title\n---\n")

        assert await _update(fake_vault) == 1
        assert fake_vault.text("note1.md") == "Here is a [[note2|Different Title]]"

    async def test_no_display_when_title_is_filename(self, fake_vault: FakeVault) -> None:
        fake_vault.add("note1.md", "Here is a [[note2]]")
        fake_vault.add("note2.md", "---\ntitle: note2\n---\n")

        assert await _update(fake_vault) == 0
        assert fake_vault.text("note1.md") == "Here is a [[note2]]"

    async def test_no_display_when_title_matches_case_insensitively(
        self, fake_vault: FakeVault
    ) -> None:
        fake_vault.add("note1.md", "Here is a [[dogs]]")
        fake_vault.add("dogs.md", "---\ntitle: Dogs\n---\n")

        assert await _update(fake_vault) == 0
        assert fake_vault.text("note1.md") == "Here is a [[dogs]]"

    async def test_nested_path(self, fake_vault: FakeVault) -> None:
        fake_vault.add("note1.md", "Here is a [[folder/note2]]")
        fake_vault.add("folder/note2.md", "---\ntitle: Different Title\n---\n")

        assert await _update(fake_vault) == 1
        assert fake_vault.text("note1.md") == "Here is a [[folder/note2|Different Title]]"

    async def test_heading_matches_filename(self, fake_vault: FakeVault) -> None:
        fake_vault.add("note1.md", "Here is a [[dogs]]")
        fake_vault.add("dogs.md", "# dogs\n")

        assert await _update(fake_vault) == 0

    async def test_no_title_sources(self, fake_vault: FakeVault) -> None:
        fake_vault.add("note1.md", "Here is a [[dogs]]")
        fake_vault.add("dogs.md", "Content about dogs")

        assert await _update(fake_vault) == 0
        assert fake_vault.text("note1.md") == "Here is a [[dogs]]"

    async def test_exact_title_beats_alias(self, fake_vault: FakeVault) -> None:
        fake_vault.add("note1.md", "Here is a [[dogs|Dogs]]")
        fake_vault.add("dogs.md", "---\ntitle: Dogs\naliases: [Doggos]\n---\n")

        assert await _update(fake_vault) == 0
        assert fake_vault.text("note1.md") == "Here is a [[dogs|Dogs]]"

    async def test_display_equal_to_path_collapses(self, fake_vault: FakeVault) -> None:
        fake_vault.add("note1.md", "[[note2|NOTE2]]")
        fake_vault.add("note2.md", "---\ntitle: note2\n---\n")

        assert await _update(fake_vault) == 1
        assert fake_vault.text("note1.md") == "[[note2]]"

    async def test_embed_is_not_rewritten(self, fake_vault: FakeVault) -> None:
        fake_vault.add("note1.md", "![[note2]]")
        fake_vault.add("note2.md", "---\ntitle: Different Title\n---\n")

        assert await _update(fake_vault) == 0

    async def test_empty_anchor_untouched(self, fake_vault: FakeVault) -> None:
        fake_vault.add("note1.md", "Here is a [[note2#|link]]")
        fake_vault.add("note2.md", "---\ntitle: Other\n---\n")

        assert await _update(fake_vault) == 0
        assert fake_vault.text("note1.md") == "Here is a [[note2#|link]]"

    async def test_case_mismatch_consults_aliases(self, fake_vault: FakeVault) -> None:
        fake_vault.add("note1.md", "Here is a [[note2|dogs]]")
        fake_vault.add("note2.md", "---\ntitle: Dogs\naliases: [Dogs of War]\n---\n")

        assert await _update(fake_vault) == 1
        assert fake_vault.text("note1.md") == "Here is a [[note2|Dogs of War]]"

    async def test_case_mismatch_without_alias_uses_title(self, fake_vault: FakeVault) -> None:
        fake_vault.add("note1.md", "Here is a [[note2|dogs]]")
        fake_vault.add("note2.md", "---\ntitle: Dogs\n---\n")

        assert await _update(fake_vault) == 1
        assert fake_vault.text("note1.md") == "Here is a [[note2|Dogs]]"


# ---------------------------------------------------------------------------
# Aliases and similarity
# ---------------------------------------------------------------------------


class TestAliases:
    async def test_similar_alias_markdown(self, fake_vault: FakeVault) -> None:
        fake_vault.add("note1.md", "Here is a [note2](note2.md) and another [Project X](note3.md)")
        fake_vault.add("note2.md", "---\ntitle: Note 2 Title\naliases: []\n---\n# Heading\n")
        fake_vault.add("note3.md", "---\ntitle: Another Title\naliases: [Project Z]\n---\n")

        assert await _update(fake_vault) == 2
        assert fake_vault.text("note1.md") == (
            "Here is a [Note 2 Title](note2.md) and another [Project Z](note3.md)"
        )

    async def test_similar_alias_wikilink(self, fake_vault: FakeVault) -> None:
        fake_vault.add("note1.md", "Here is a [[note2|Hello]] and another [[note3|Project X]]")
        fake_vault.add("note2.md", "---\ntitle: Note 2 Title\naliases: []\n---\n")
        fake_vault.add("note3.md", "---\ntitle: Another Title\naliases: [Project Z]\n---\n")

        assert await _update(fake_vault) == 2
        assert fake_vault.text("note1.md") == (
            "Here is a [[note2|Note 2 Title]] and another [[note3|Project Z]]"
        )

    async def test_substring_alias(self, fake_vault: FakeVault) -> None:
        fake_vault.add("note1.md", "Here is a [Hello](note2.md) and another [Project](note3.md)")
        fake_vault.add("note2.md", "---\ntitle: Note 2 Title\naliases: [Hello 2]\n---\n")
        fake_vault.add("note3.md", "---\ntitle: Another Title\naliases: [My Project Name]\n---\n")

        assert await _update(fake_vault) == 2
        assert fake_vault.text("note1.md") == (
            "Here is a [Hello 2](note2.md) and another [My Project Name](note3.md)"
        )

    async def test_exact_alias_beats_substring(self, fake_vault: FakeVault) -> None:
        fake_vault.add("note1.md", "Here is a [Jess](person.md)")
        fake_vault.add("person.md", "---\naliases: [Jessica, Jess]\n---\n# Jessica Jones\n")

        assert await _update(fake_vault) == 0
        assert fake_vault.text("note1.md") == "Here is a [Jess](person.md)"

    async def test_single_string_alias(self, fake_vault: FakeVault) -> None:
        fake_vault.add("note1.md", "[doggo](dogs.md)")
        fake_vault.add("dogs.md", "---\ntitle: Dogs\naliases: Doggo\n---\n")

        assert await _update(fake_vault) == 1
        assert fake_vault.text("note1.md") == "[Doggo](dogs.md)"

    async def test_aliases_disabled_uses_title(self, fake_vault: FakeVault) -> None:
        fake_vault.add("note1.md", "Here is a [World](note2.md)")
        fake_vault.add("note2.md", "---\ntitle: Dogs 1\naliases: [Hello, World]\n---\n")

        assert await _update(fake_vault, use_aliases=False) == 1
        assert fake_vault.text("note1.md") == "Here is a [Dogs 1](note2.md)"

    async def test_threshold_boundary_accepted(self, fake_vault: FakeVault) -> None:
        fake_vault.add("note1.md", "[abcd](note2.md)")
        fake_vault.add("note2.md", "---\ntitle: Title\naliases: [abce]\n---\n")

        assert await _update(fake_vault, similarity_threshold=0.75) == 1
        assert fake_vault.text("note1.md") == "[abce](note2.md)"

    async def test_threshold_boundary_rejected(self, fake_vault: FakeVault) -> None:
        fake_vault.add("note1.md", "[abcd](note2.md)")
        fake_vault.add("note2.md", "---\ntitle: Title\naliases: [abce]\n---\n")

        assert await _update(fake_vault, similarity_threshold=0.8) == 1
        assert fake_vault.text("note1.md") == "[Title](note2.md)"


# ---------------------------------------------------------------------------
# Title source settings
# ---------------------------------------------------------------------------


class TestTitleSources:
    TARGET = "---\ntitle: Frontmatter Title\ncustomTitle: Custom Property Title\n---\n# Heading Title\n"

    async def test_frontmatter_disabled(self, fake_vault: FakeVault) -> None:
        fake_vault.add("note1.md", "Here is a [link](note2.md)")
        fake_vault.add("note2.md", self.TARGET)

        assert await _update(fake_vault, use_frontmatter_title=False) == 1
        assert fake_vault.text("note1.md") == "Here is a [Heading Title](note2.md)"

    async def test_first_heading_disabled(self, fake_vault: FakeVault) -> None:
        fake_vault.add("note1.md", "Here is a [link](note2.md)")
        fake_vault.add("note2.md", "# Heading Title\n")

        assert await _update(fake_vault, use_first_heading=False) == 1
        assert fake_vault.text("note1.md") == "Here is a [note2](note2.md)"

    async def test_both_disabled_uses_filename(self, fake_vault: FakeVault) -> None:
        fake_vault.add("note1.md", "Here is a [link](note2.md)")
        fake_vault.add("note2.md", self.TARGET)

        updated = await _update(fake_vault, use_frontmatter_title=False, use_first_heading=False)
        assert updated == 1
        assert fake_vault.text("note1.md") == "Here is a [note2](note2.md)"

    async def test_custom_property(self, fake_vault: FakeVault) -> None:
        fake_vault.add("note1.md", "Here is a [link](note2.md)")
        fake_vault.add("note2.md", self.TARGET)

        assert await _update(fake_vault, frontmatter_title_property="customTitle") == 1
        assert fake_vault.text("note1.md") == "Here is a [Custom Property Title](note2.md)"

    async def test_missing_custom_property_falls_back(self, fake_vault: FakeVault) -> None:
        fake_vault.add("note1.md", "Here is a [link](note2.md)")
        fake_vault.add("note2.md", "---\ntitle: Default Title\n---\n# Heading Title\n")

        assert await _update(fake_vault, frontmatter_title_property="customTitle") == 1
        assert fake_vault.text("note1.md") == "Here is a [Heading Title](note2.md)"


# ---------------------------------------------------------------------------
# Engine properties
# ---------------------------------------------------------------------------


class TestEngineProperties:
    async def test_idempotent(self, fake_vault: FakeVault) -> None:
        fake_vault.add(
            "note1.md",
            "A [link](note2.md), [[note2]], [[note3|x]], [[note3|NOTE 3]] and [Project X](note3.md)",
        )
        fake_vault.add("note2.md", "---\ntitle: Front Matter Title\n---\n")
        fake_vault.add("note3.md", "---\ntitle: note 3\naliases: [Project Z]\n---\n")

        updater = fake_vault.updater()
        assert await updater.update_links_in_note(NOTE1) > 0
        first = fake_vault.text("note1.md")
        writes = len(fake_vault.store.writes)

        assert await updater.update_links_in_note(NOTE1) == 0
        assert fake_vault.text("note1.md") == first
        assert len(fake_vault.store.writes) == writes

    async def test_case_only_difference_corrected(self, fake_vault: FakeVault) -> None:
        fake_vault.add("note1.md", "[front matter title](note2.md)")
        fake_vault.add("note2.md", "---\ntitle: Front Matter Title\naliases: [front]\n---\n")

        assert await _update(fake_vault) == 1
        assert fake_vault.text("note1.md") == "[Front Matter Title](note2.md)"

    async def test_mixed_syntaxes_in_one_document(self, fake_vault: FakeVault) -> None:
        fake_vault.add("note1.md", "[old](note2.md)\n[[note2|older]]\n")
        fake_vault.add("note2.md", "# New\n")

        assert await _update(fake_vault) == 2
        assert fake_vault.text("note1.md") == "[New](note2.md)\n[[note2|New]]\n"

    async def test_fenced_code_untouched(self, fake_vault: FakeVault) -> None:
        fake_vault.add(
            "note1.md",
            "```\n[old](note2.md) [[note2|old]]\n```\n[old](note2.md)\n",
        )
        fake_vault.add("note2.md", "# New\n")

        assert await _update(fake_vault) == 1
        assert fake_vault.text("note1.md") == (
            "```\n[old](note2.md) [[note2|old]]\n```\n[New](note2.md)\n"
        )

    async def test_source_without_metadata_skipped(self, fake_vault: FakeVault) -> None:
        fake_vault.add("note1.md", "[old](note2.md)", metadata=None)
        fake_vault.add("note2.md", "# New\n")

        assert await _update(fake_vault) == 0
        assert fake_vault.store.writes == []

    async def test_no_change_means_no_write(self, fake_vault: FakeVault) -> None:
        fake_vault.add("note1.md", "[Title](note2.md)")
        fake_vault.add("note2.md", "# Title\n")

        assert await _update(fake_vault) == 0
        assert fake_vault.store.writes == []

    async def test_title_from_metadata_snapshot(self, fake_vault: FakeVault) -> None:
        fake_vault.add("note1.md", "[old](note2.md)")
        fake_vault.add(
            "note2.md",
            "# Ignored\n",
            metadata=DocumentMetadata(headings=(Heading("Snapshot Title"),)),
        )

        assert await _update(fake_vault) == 1
        assert fake_vault.text("note1.md") == "[Snapshot Title](note2.md)"

    async def test_read_failure_propagates(self, fake_vault: FakeVault) -> None:
        fake_vault.add("note1.md", "[old](note2.md)")
        fake_vault.add("note2.md", "# New\n")
        fake_vault.store.fail_reads.add("note1.md")

        with pytest.raises(OSError):
            await _update(fake_vault)
