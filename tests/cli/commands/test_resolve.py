"""GCDI resolve 命令的单元测试"""

import click
import pytest
from click.testing import CliRunner

from gcdi.cli.commands.resolve import ResolveCommand, parse_parameters
from gcdi.cli.main import cli
from gcdi.core.container import Container
from gcdi.core.exceptions import UnresolvableParameterError


class Greeter:
    def __init__(self, greeting: str):
        self.greeting = greeting

    def __repr__(self):
        return f"Greeter(greeting={self.greeting!r})"


class TestParseParameters:
    """测试参数解析"""

    def test_parse(self):
        """测试 name=value 解析"""
        assert parse_parameters(("host=smtp.local", "url=a=b")) == {"host": "smtp.local", "url": "a=b"}

    def test_invalid(self):
        """测试缺少等号"""
        with pytest.raises(click.BadParameter):
            parse_parameters(("host",))


class TestResolveCommand:
    """测试 ResolveCommand"""

    def test_execute(self):
        """测试带参数构造"""
        cmd = ResolveCommand(container=Container())

        assert cmd.execute(f"{__name__}.Greeter", {"greeting": "hi"}).greeting == "hi"

    def test_execute_error(self):
        """测试解析错误以原始类型抛出"""
        cmd = ResolveCommand(container=Container())

        with pytest.raises(UnresolvableParameterError):
            cmd.execute(f"{__name__}.Greeter", {})


class TestResolveCli:
    """测试 resolve 命令行"""

    def test_resolve_core_type(self, tmp_path):
        """测试解析核心类型"""
        result = CliRunner().invoke(
            cli,
            ["--no-color", "--config", str(tmp_path / "gcdi.yaml"),
             "resolve", "gcdi.core.metadata.CoreFieldsMetadata"],
        )

        assert result.exit_code == 0
        assert "Resolved gcdi.core.metadata.CoreFieldsMetadata" in result.output

    def test_resolve_with_params(self, tmp_path):
        """测试 --param 参数"""
        result = CliRunner().invoke(
            cli,
            ["--no-color", "--verbose", "--config", str(tmp_path / "gcdi.yaml"),
             "resolve", f"{__name__}.Greeter", "--param", "greeting=hello"],
        )

        assert result.exit_code == 0
        assert "Greeter(greeting='hello')" in result.output

    def test_resolve_unknown_type(self, tmp_path):
        """测试类型不存在"""
        result = CliRunner().invoke(
            cli,
            ["--no-color", "--config", str(tmp_path / "gcdi.yaml"), "resolve", "no_such_module_xyz.Thing"],
        )

        assert result.exit_code == 1
        assert "错误" in result.output

    def test_resolve_bad_param(self, tmp_path):
        """测试参数格式错误"""
        result = CliRunner().invoke(
            cli,
            ["--config", str(tmp_path / "gcdi.yaml"), "resolve", f"{__name__}.Greeter", "--param", "greeting"],
        )

        assert result.exit_code == 2
