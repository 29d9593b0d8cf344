from npm_runner.arguments import ArgumentBuilder


def test_empty_builder_renders_empty_string():
    args = ArgumentBuilder()
    assert args.render() == ""
    assert args.to_list() == []
    assert len(args) == 0


def test_tokens_render_in_append_order():
    args = ArgumentBuilder()
    args.append("install").append("gulp").append("--global")
    assert args.render() == "install gulp --global"
    assert args.to_list() == ["install", "gulp", "--global"]


def test_whitespace_tokens_are_quoted_on_render_only():
    args = ArgumentBuilder()
    args.append("run-script").append("my script")
    assert args.render() == 'run-script "my script"'
    assert args.to_list() == ["run-script", "my script"]


def test_append_quoted_forces_quotes_and_escapes_inner_quotes():
    args = ArgumentBuilder()
    args.append_quoted("arg-value.file").append_quoted('say "hi"')
    assert args.render() == '"arg-value.file" "say \\"hi\\""'


def test_render_is_repeatable():
    args = ArgumentBuilder().extend(["a", "b c"])
    assert args.render() == args.render() == str(args)
    assert [t.value for t in args] == ["a", "b c"]
