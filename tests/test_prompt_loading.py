"""Tests for prompt loading and rendering."""

from __future__ import annotations

from pathlib import Path

import pytest

from vibe_themer.prompts.loader import (
    PromptTemplate,
    PromptVariable,
    load_prompt,
    parse_frontmatter,
)
from vibe_themer.prompts.renderer import prepare_prompt, render_string


# --- parse_frontmatter ---

def test_parse_frontmatter_extracts_yaml_and_body():
    content = "---\ntitle: Test\nauthor: Nobody\n---\nHello, world!"
    fm, body = parse_frontmatter(content)
    assert fm["title"] == "Test"
    assert fm["author"] == "Nobody"
    assert body == "Hello, world!"


def test_parse_frontmatter_no_frontmatter():
    content = "Just plain text\nwith no YAML."
    fm, body = parse_frontmatter(content)
    assert fm == {}
    assert body == content.strip()


def test_parse_frontmatter_unclosed_returns_raw():
    content = "---\ntitle: Test\nNo closing delimiter here."
    fm, body = parse_frontmatter(content)
    assert fm == {}
    assert body == content.strip()


# --- load_prompt ---

def test_builtin_prompts_load():
    streaming = load_prompt("streaming")
    full = load_prompt("full")
    assert [v.name for v in streaming.variables] == ["has_context"]
    assert "SELECTOR:" in streaming.system_prompt
    assert "tokenColors" in full.system_prompt


def test_load_prompt_from_path(tmp_path: Path):
    path = tmp_path / "mine.md"
    path.write_text(
        "---\ndescription: Custom\nvariables:\n  - name: mood\n    default: calm\n---\n"
        "Make it {{ mood }}.",
        encoding="utf-8",
    )
    prompt = load_prompt(path)
    assert prompt.description == "Custom"
    assert prompt.variables == [PromptVariable(name="mood", default="calm")]
    assert prepare_prompt(prompt, {}) == "Make it calm."


def test_load_prompt_unknown_name_raises():
    with pytest.raises(FileNotFoundError):
        load_prompt("does-not-exist")


def test_load_prompt_empty_body_raises(tmp_path: Path):
    path = tmp_path / "empty.md"
    path.write_text("---\ndescription: nothing\n---\n", encoding="utf-8")
    with pytest.raises(ValueError, match="empty body"):
        load_prompt(path)


# --- prepare_prompt ---

def test_prepare_prompt_renders_variables():
    prompt = PromptTemplate(
        description="test",
        variables=[PromptVariable(name="name")],
        system_prompt="Hello, {{ name }}!",
    )
    assert prepare_prompt(prompt, {"name": "Alice"}) == "Hello, Alice!"


def test_prepare_prompt_uses_defaults():
    prompt = PromptTemplate(
        description="test",
        variables=[PromptVariable(name="name", default="World")],
        system_prompt="Hello, {{ name }}!",
    )
    assert prepare_prompt(prompt, {}) == "Hello, World!"


def test_prepare_prompt_missing_required_raises():
    prompt = PromptTemplate(
        description="test",
        variables=[PromptVariable(name="name", required=True)],
        system_prompt="Hello, {{ name }}!",
    )
    with pytest.raises(ValueError, match="required"):
        prepare_prompt(prompt, {})


def test_streaming_prompt_switches_on_context():
    prompt = load_prompt("streaming")
    with_context = prepare_prompt(prompt, {"has_context": True})
    without_context = prepare_prompt(prompt, {"has_context": False})
    assert "CURRENT THEME CONTEXT" in with_context
    assert "No theme is currently applied" not in with_context
    assert "No theme is currently applied" in without_context
    assert "{%" not in without_context


# --- render_string ---

def test_render_string_undefined_variable_renders_empty():
    result = render_string("Hello, {{ missing }}!", {})
    assert result == "Hello, !"
