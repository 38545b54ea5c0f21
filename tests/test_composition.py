from cssforge import Engine, classnames
from cssforge.composition import split_registered


def test_classnames_flattens_arguments() -> None:
    assert classnames("a", {"b": True, "c": False}, None, ["d", "e"]) == "a b d e"


def test_classnames_nested_values() -> None:
    assert classnames(("a", ["b", ("c",)]), lambda: ["d", {"e": 1}], 3, True, "") == "a b c d e 3"
    assert classnames() == ""
    assert classnames(None, False, {}) == ""


def test_split_registered() -> None:
    split = split_registered("a css-1 b css-2", {"css-1": "x", "css-2": "y"})
    assert split.registered == ["css-1", "css-2"]
    assert split.raw == "a b "


def test_get_registered_styles(engine: Engine) -> None:
    first = engine.css("color:red;")
    second = engine.css("margin:0;")
    found = []
    raw = engine.get_registered_styles(found, f"{first} foo {second}")
    assert found == [first, second]
    assert raw == "foo "


def test_cx_single_token_is_unchanged(engine: Engine) -> None:
    token = engine.css("color:red;")
    assert engine.cx(token) == token
    assert engine.cx(token, "other") == f"{token} other"
    assert engine.cx("plain", {"other": True}) == "plain other"


def test_cx_collapses_registered_tokens(engine: Engine) -> None:
    first = engine.css("color:red;")
    second = engine.css({"margin": 0})
    merged = engine.cx(first, second)

    assert merged not in (first, second)
    assert engine.registered[merged] == "color:red;margin:0;"
    assert f".{merged}{{color:red;margin:0;}}" in engine.sheet.rules


def test_cx_follows_argument_order(engine: Engine) -> None:
    first = engine.css("color:red;")
    second = engine.css("color:blue;")
    forward = engine.cx(first, second)
    backward = engine.cx(second, first)
    assert engine.registered[forward] == "color:red;color:blue;"
    assert engine.registered[backward] == "color:blue;color:red;"


def test_cx_keeps_raw_class_names(engine: Engine) -> None:
    first = engine.css("color:red;")
    second = engine.css("margin:0;")
    result = engine.cx("foo", first, {"bar": True, second: True})
    merged = engine.merge(f"{first} {second}")
    assert result == f"foo bar {merged}"


def test_merge_appends_source_map(engine: Engine) -> None:
    first = engine.css("color:red;")
    second = engine.css("margin:0;")
    comment = "/*# sourceMappingURL=data:application/json;base64,abc */"
    merged = engine.merge(f"{first} {second}", comment)
    assert engine.registered[merged] == f"color:red;margin:0;{comment}"
    assert engine.sheet.css_text().endswith(comment)
