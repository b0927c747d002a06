import json
import logging
from pathlib import Path

import pytest
from click.testing import CliRunner, Result

from codeblock import __version__
from codeblock.cli import catch_exceptions, main
from codeblock.error import UserFacingError


def run(
    *args: str,
    expected_exit_code: int = 0,
    input: str | None = None,
) -> Result:
    runner = CliRunner()
    result = runner.invoke(main, args, input=input, catch_exceptions=False)
    if result.exit_code != expected_exit_code:
        raise AssertionError(
            f"""
The command `codeblock {" ".join(args)}` unexpectedly exited with code {result.exit_code}, but {expected_exit_code} was expected.
Output:
{result.output}
"""
        )
    return result


class TestMain:
    def test_help(self) -> None:
        run("--help")

    def test_version(self) -> None:
        result = run("--version")
        assert __version__ in result.output


class TestRender:
    def test_with_stdin(self) -> None:
        result = run(
            "render",
            "--highlighter",
            "none",
            input="{% codeblock Example page.html %}\n<p>Hi</p>\n{% endcodeblock %}",
        )
        assert (
            '<figure class="highlight"><figcaption><span>Example page.html</span></figcaption>\n<pre><code class="language-html" data-lang="html">&lt;p&gt;Hi&lt;/p&gt;</code></pre></figure>'
            in result.output
        )

    def test_with_file(self, tmp_path: Path) -> None:
        template_file_path = tmp_path / "page.html.j2"
        template_file_path.write_text(
            "<main>{% highlight ruby %}puts 1{% endhighlight %}</main>"
        )
        result = run("render", "--highlighter", "none", str(template_file_path))
        assert (
            '<main><figure class="highlight"><pre><code class="language-ruby" data-lang="ruby">puts 1</code></pre></figure></main>'
            in result.output
        )

    def test_with_file_including_other_file(self, tmp_path: Path) -> None:
        (tmp_path / "code.html.j2").write_text(
            "{% codeblock lang:ruby %}puts 1{% endcodeblock %}"
        )
        template_file_path = tmp_path / "page.html.j2"
        template_file_path.write_text('<main>{% include "code.html.j2" %}</main>')
        result = run("render", "--highlighter", "none", str(template_file_path))
        assert 'data-lang="ruby">puts 1</code>' in result.output

    def test_with_pygments(self) -> None:
        result = run(
            "render",
            input="{% codeblock lang:python %}\nimport sys\n{% endcodeblock %}",
        )
        assert '<code class="language-python" data-lang="python">' in result.output
        assert "linenos" in result.output

    def test_with_configuration_file(self, tmp_path: Path) -> None:
        configuration_file_path = tmp_path / "codeblock.json"
        configuration_file_path.write_text(
            json.dumps(
                {
                    "highlighter": "none",
                    "prefix": "<div>",
                    "suffix": "</div>",
                }
            )
        )
        result = run(
            "render",
            "--configuration",
            str(configuration_file_path),
            input="{% codeblock %}x{% endcodeblock %}",
        )
        assert (
            '<div><figure class="highlight"><pre><code class="language-" data-lang="">x</code></pre></figure></div>'
            in result.output
        )

    def test_with_invalid_configuration_file(self, tmp_path: Path) -> None:
        configuration_file_path = tmp_path / "codeblock.yaml"
        configuration_file_path.write_text("highlighter: rouge\n")
        result = run(
            "render",
            "--configuration",
            str(configuration_file_path),
            input="{% codeblock %}x{% endcodeblock %}",
            expected_exit_code=1,
        )
        assert '"rouge" is not valid' in result.output

    def test_with_unknown_file(self, tmp_path: Path) -> None:
        result = run(
            "render", str(tmp_path / "non-existent.html.j2"), expected_exit_code=1
        )
        assert "Could not find the file" in result.output

    def test_with_template_syntax_error(self) -> None:
        result = run(
            "render",
            input="{% highlight %}x{% endhighlight %}",
            expected_exit_code=1,
        )
        assert "Syntax Error in tag 'highlight'" in result.output

    def test_with_unmet_requirement(self, tmp_path: Path) -> None:
        configuration_file_path = tmp_path / "codeblock.yml"
        configuration_file_path.write_text(
            "pygmentize: codeblock-non-existent-command\n"
        )
        result = run(
            "render",
            "--highlighter",
            "pygmentize",
            "--configuration",
            str(configuration_file_path),
            input="{% codeblock %}x{% endcodeblock %}",
            expected_exit_code=1,
        )
        assert 'The command "codeblock-non-existent-command" must be available.' in (
            result.output
        )


class TestStyle:
    def test_with_default_style(self) -> None:
        result = run("style")
        assert ".highlight" in result.output

    def test_with_style(self) -> None:
        result = run("style", "monokai")
        assert ".highlight" in result.output

    def test_with_unknown_style(self) -> None:
        result = run("style", "codeblock-non-existent-style", expected_exit_code=1)
        assert 'Unknown Pygments style "codeblock-non-existent-style".' in (
            result.output
        )


class TestCatchExceptions:
    def test_without_exception(self) -> None:
        with catch_exceptions():
            pass

    def test_with_keyboard_interrupt(self) -> None:
        with pytest.raises(SystemExit) as exit_info, catch_exceptions():
            raise KeyboardInterrupt
        assert exit_info.value.code == 0

    def test_with_user_facing_error(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.ERROR):
            with pytest.raises(SystemExit) as exit_info, catch_exceptions():
                raise UserFacingError("Something went wrong!")
        assert exit_info.value.code == 1
        assert "Something went wrong!" in caplog.text
        assert "Traceback" not in caplog.text

    def test_with_other_error(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.ERROR):
            with pytest.raises(SystemExit) as exit_info, catch_exceptions():
                raise RuntimeError("Something went wrong!")
        assert exit_info.value.code == 1
        assert "Traceback" in caplog.text
