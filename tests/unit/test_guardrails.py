"""Tests for the input sanitizer and the suspicious-content audit check."""

import pytest

from portfolio_chat.core.guardrails import (
    DEFAULT_MAX_LENGTH,
    contains_suspicious_content,
    sanitize_input,
)


class TestSanitizeScriptRemoval:
    """Script elements are removed with their content in any casing."""

    @pytest.mark.parametrize("payload", [
        '<script>alert("XSS")</script>',
        "<SCRIPT>alert(1)</SCRIPT>",
        "<ScRiPt type='text/javascript'>steal()</sCrIpT>",
        "<script>\nconst a = 1;\nalert(a);\n</script>",
        "<script src='//evil.example/x.js'></script>",
        "<script>a</script>b</script>",
        "<scr<script>x</script>ipt>alert(1)</script>",
    ])
    def test_no_script_tag_survives(self, payload):
        for wrapped in (payload, f"Hello {payload} World", f"{payload}{payload}"):
            result = sanitize_input(wrapped)
            assert "<script" not in result.lower()

    def test_keeps_surrounding_text(self):
        assert sanitize_input("Hello <script>document.cookie</script> World") == "Hello  World"

    def test_unclosed_opening_tag_removed(self):
        assert "<script" not in sanitize_input("hi <script>alert(1)").lower()

    def test_truncation_cannot_expose_a_tag(self):
        result = sanitize_input("ab<scripts are fun", max_length=9)
        assert "<script" not in result.lower()


class TestSanitizeOtherVectors:

    @pytest.mark.parametrize("payload", [
        "<iframe src=\"javascript:alert('XSS')\"></iframe>",
        "<object data='x.swf'>fallback</object>",
        "<embed src='x.swf'></embed>",
    ])
    def test_removes_embedding_elements(self, payload):
        result = sanitize_input(f"before {payload} after")
        assert result == "before  after"

    @pytest.mark.parametrize("payload, expected", [
        ('javascript:alert("XSS")', 'alert("XSS")'),
        ('vbscript:msgbox("XSS")', 'msgbox("XSS")'),
        ("JavaScript:void(0)", "void(0)"),
        ("data:text/html,hello", ",hello"),
    ])
    def test_removes_script_schemes(self, payload, expected):
        assert sanitize_input(payload) == expected

    def test_removes_event_handlers(self):
        result = sanitize_input("onclick=\"alert('XSS')\" test")
        assert "onclick" not in result
        assert "test" in result

    def test_removes_event_handler_with_spaces(self):
        assert "onmouseover" not in sanitize_input("<img onmouseover = 'x'>")

    @pytest.mark.parametrize("payload", [
        '<script>alert("XSS")</script>',
        'javascript:alert("XSS")',
        "<iframe src=\"javascript:alert('XSS')\"></iframe>",
        "Hello <script>document.cookie</script> World",
        "onclick=\"alert('XSS')\" test",
        'data:text/html,<script>alert("XSS")</script>',
        'vbscript:msgbox("XSS")',
    ])
    def test_sanitized_output_passes_audit(self, payload):
        assert not contains_suspicious_content(sanitize_input(payload))


class TestSanitizeBasics:

    def test_plain_text_unchanged(self):
        assert sanitize_input("Tell me about your projects") == "Tell me about your projects"

    def test_trims_whitespace(self):
        assert sanitize_input("   hello world \n\t") == "hello world"

    def test_default_truncation(self):
        assert len(sanitize_input("x" * 2000)) == DEFAULT_MAX_LENGTH

    def test_custom_truncation(self):
        assert sanitize_input("abcdefgh", max_length=3) == "abc"

    def test_only_prefix_is_scanned(self):
        result = sanitize_input("<script>" * 20000)
        assert result == ""

    def test_long_input_still_truncated_after_removal(self):
        payload = "<script>x</script>" * 20 + "visible text " * 100
        result = sanitize_input(payload)
        assert result.startswith("visible text")
        assert len(result) <= DEFAULT_MAX_LENGTH

    def test_only_markup_becomes_empty(self):
        assert sanitize_input("<script>alert(1)</script>") == ""

    @pytest.mark.parametrize("bad", [None, 42, ["hello"], {"message": "hi"}, b"bytes"])
    def test_rejects_non_text(self, bad):
        with pytest.raises(TypeError):
            sanitize_input(bad)


class TestSanitizeIdempotence:

    @pytest.mark.parametrize("payload", [
        "Hello world",
        "  padded   ",
        "Hello <script>x</script> World",
        "<scr<script></script>ipt>alert(1)</script> tail",
        "onon==click",
        "javajavascript:script:alert(1)",
        "x" * 498 + "  yy",
        "<iframe>\n\n</iframe>   trailing   ",
    ])
    def test_sanitizing_twice_changes_nothing(self, payload):
        once = sanitize_input(payload)
        assert sanitize_input(once) == once

    def test_idempotent_with_short_limit(self):
        once = sanitize_input("abc   def <script>1</script>", max_length=5)
        assert sanitize_input(once, max_length=5) == once


class TestContainsSuspiciousContent:

    @pytest.mark.parametrize("text", [
        "<script>alert(1)</script>",
        "<SCRIPT",
        "javascript:void(0)",
        "VBScript:run",
        "onload=doIt()",
        "<iframe src=x>",
        "<object>",
        "<embed>",
        "data:text/html;base64,xx",
        "eval(atob('x'))",
        "new Function ('return 1')",
        "setTimeout(run, 10)",
        "setInterval (tick, 1000)",
    ])
    def test_flags_patterns(self, text):
        assert contains_suspicious_content(text)

    @pytest.mark.parametrize("text", [
        "Tell me about your projects",
        "What is your evaluation process?",
        "How do you handle timeouts?",
        "",
    ])
    def test_allows_normal_text(self, text):
        assert not contains_suspicious_content(text)
