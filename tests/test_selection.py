"""
Tests for resolving selection requests, both from flags and interactively.
"""

import pytest

from rooinit.definitions import CategoryDefinition, DefinitionSet, ModeDefinition
from rooinit.errors import SelectionError
from rooinit.selection import (
    PromptCancelled,
    SelectionRequest,
    SelectionResolver,
    SelectionResult,
    split_slugs,
)


def make_definitions(categories, modes):
    """modes: {slug: [category slugs]}"""
    return DefinitionSet(
        modes=tuple(
            ModeDefinition(slug, slug.upper(), f"{slug} mode", category_slugs=tuple(cats))
            for slug, cats in modes.items()
        ),
        categories=tuple(CategoryDefinition(slug, slug.title(), f"{slug} category") for slug in categories),
    )


@pytest.fixture
def definitions():
    return make_definitions(
        ["cat1", "cat2", "catX"],
        {
            "a": ["catX"],
            "m1": ["cat2"],
            "m2": ["cat1"],
            "m3": ["cat1", "cat2"],
        },
    )


class ScriptedPrompter:
    """Replays answers; an Exception instance in the script is raised."""

    def __init__(self, *answers):
        self.answers = list(answers)
        self.calls = []

    def _next(self, kind, message, choices=None):
        self.calls.append((kind, message, choices))
        answer = self.answers.pop(0)
        if isinstance(answer, Exception):
            raise answer
        return answer

    def select_one(self, message, choices):
        slug = self._next("one", message, choices)
        return next(c.value for c in choices if c.value.slug == slug)

    def select_many(self, message, choices):
        return self._next("many", message, choices)

    def confirm(self, message, default=False):
        return self._next("confirm", message)


# =============================================================================
# NON-INTERACTIVE
# =============================================================================

class TestExplicitResolution:

    def test_explicit_modes(self, definitions):
        result = SelectionResolver(definitions).resolve(SelectionRequest(("m2", "a")))

        assert result.mode_slugs == ["m2", "a"]
        assert not result.has_errors

    def test_dedup_and_order(self, definitions):
        request = SelectionRequest(mode_slugs=("m1", "m2"), category_slugs=("cat1",))

        result = SelectionResolver(definitions).resolve(request)

        assert result.mode_slugs == ["m1", "m2", "m3"]

    def test_category_expansion_follows_definition_order(self, definitions):
        result = SelectionResolver(definitions).resolve(SelectionRequest(category_slugs=("cat2",)))

        assert result.mode_slugs == ["m1", "m3"]

    def test_aggregates_all_invalid_slugs(self, definitions):
        request = SelectionRequest(mode_slugs=("a", "missing1"), category_slugs=("catX", "missing2"))

        result = SelectionResolver(definitions).resolve(request)

        assert result.invalid_mode_slugs == ["missing1"]
        assert result.invalid_category_slugs == ["missing2"]
        assert result.mode_slugs == ["a"]

    def test_empty_valid_category_is_not_an_error(self):
        definitions = make_definitions(["empty"], {"a": []})

        result = SelectionResolver(definitions).resolve(SelectionRequest(category_slugs=("empty",)))

        assert result.is_empty
        assert not result.has_errors

    def test_blank_slugs_are_ignored(self, definitions):
        result = SelectionResolver(definitions).resolve(SelectionRequest(mode_slugs=(" ", "a ")))

        assert result.mode_slugs == ["a"]


class TestSelect:

    def test_select_raises_with_complete_lists(self, definitions):
        request = SelectionRequest(mode_slugs=("a", "nope", "gone"), category_slugs=("catX", "void"))

        with pytest.raises(SelectionError) as exc_info:
            SelectionResolver(definitions).select(request)

        error = exc_info.value
        assert error.invalid_mode_slugs == ["nope", "gone"]
        assert error.invalid_category_slugs == ["void"]
        assert "mode: nope, mode: gone, category: void" in str(error)

    def test_select_returns_valid_result(self, definitions):
        result = SelectionResolver(definitions).select(SelectionRequest(("m3",)))

        assert result.mode_slugs == ["m3"]

    def test_modes_for_maps_to_definitions(self, definitions):
        resolver = SelectionResolver(definitions)
        result = resolver.select(SelectionRequest(("m3", "a")))

        assert [m.slug for m in resolver.modes_for(result)] == ["m3", "a"]

    def test_modes_for_unknown_slug_fails_loudly(self, definitions):
        with pytest.raises(KeyError):
            SelectionResolver(definitions).modes_for(SelectionResult(mode_slugs=["a", "gone"]))


class TestSplitSlugs:

    def test_split(self):
        assert split_slugs(" a, b,,c ") == ["a", "b", "c"]

    def test_none(self):
        assert split_slugs(None) == []

    def test_request_from_flags(self):
        request = SelectionRequest.from_flags("x,y", None)

        assert request.mode_slugs == ("x", "y")
        assert not request.interactive

    def test_no_flags_is_interactive(self):
        assert SelectionRequest.from_flags(None, "").interactive


# =============================================================================
# INTERACTIVE
# =============================================================================

class TestInteractiveResolution:

    def test_single_pass(self, definitions):
        prompter = ScriptedPrompter("cat1", ["m2", "m3"], False)

        result = SelectionResolver(definitions, prompter).select(SelectionRequest())

        assert result.mode_slugs == ["m2", "m3"]
        assert [c[0] for c in prompter.calls] == ["one", "many", "confirm"]

    def test_multiple_categories_dedup(self, definitions):
        prompter = ScriptedPrompter("cat1", ["m3"], True, "cat2", ["m1", "m3"], False)

        result = SelectionResolver(definitions, prompter).resolve_interactively()

        assert result.mode_slugs == ["m3", "m1"]

    def test_mode_choices_are_limited_to_category(self, definitions):
        prompter = ScriptedPrompter("catX", ["a"], False)

        SelectionResolver(definitions, prompter).resolve_interactively()

        _, _, choices = prompter.calls[1]
        assert [c.value for c in choices] == ["a"]

    def test_cancel_at_category_returns_accumulated(self, definitions):
        prompter = ScriptedPrompter("cat1", ["m2"], True, PromptCancelled())

        result = SelectionResolver(definitions, prompter).resolve_interactively()

        assert result.mode_slugs == ["m2"]

    def test_cancel_at_modes_returns_accumulated(self, definitions):
        prompter = ScriptedPrompter("cat1", ["m2"], True, "cat2", PromptCancelled())

        result = SelectionResolver(definitions, prompter).resolve_interactively()

        assert result.mode_slugs == ["m2"]

    def test_cancel_at_confirm_keeps_selection(self, definitions):
        prompter = ScriptedPrompter("cat2", ["m1"], PromptCancelled())

        result = SelectionResolver(definitions, prompter).resolve_interactively()

        assert result.mode_slugs == ["m1"]

    def test_immediate_cancel_is_empty(self, definitions):
        prompter = ScriptedPrompter(PromptCancelled())

        result = SelectionResolver(definitions, prompter).resolve_interactively()

        assert result.is_empty
        assert not result.has_errors

    def test_single_category_skips_confirm(self):
        definitions = make_definitions(["only"], {"x": ["only"], "y": ["only"]})
        prompter = ScriptedPrompter("only", ["y"])

        result = SelectionResolver(definitions, prompter).resolve_interactively()

        assert result.mode_slugs == ["y"]
        assert [c[0] for c in prompter.calls] == ["one", "many"]

    def test_category_without_modes(self, definitions, caplog):
        definitions = make_definitions(["a", "b"], {"x": ["b"]})
        prompter = ScriptedPrompter("a", False)

        result = SelectionResolver(definitions, prompter).resolve_interactively()

        assert result.is_empty
        assert "No modes available in category" in caplog.text

    def test_no_categories(self):
        definitions = make_definitions([], {})
        prompter = ScriptedPrompter()

        result = SelectionResolver(definitions, prompter).resolve_interactively()

        assert result.is_empty
        assert prompter.calls == []
