"""Tests for command line bootstrap"""
from unittest.mock import patch
import pytest

import main


CONFIG_ENV = ["DB_HOST", "DB_PORT", "DB_NAME", "DB_USER", "DB_PASSWORD", "TABLE_PREFIX", "SKIP_WOOCOMMERCE"]


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    for name in CONFIG_ENV:
        monkeypatch.delenv(name, raising=False)


class TestCommandLine:
    """Test flag parsing and startup failures"""

    def test_go_style_flags(self):
        """Test single dash flags map onto configuration fields"""
        overrides = main.parse_args([
            "-host", "db.internal", "-port", "3307", "-db", "wordpress",
            "-user", "exporter", "-pass", "secret", "-tableprefix", "shop_",
            "-skipwoocommerce", "true",
        ])

        assert overrides == {
            "db_host": "db.internal",
            "db_port": "3307",
            "db_name": "wordpress",
            "db_user": "exporter",
            "db_password": "secret",
            "table_prefix": "shop_",
            "skip_woocommerce": True,
        }

    def test_equals_and_double_dash_forms(self):
        """Test -flag=value and --flag value"""
        overrides = main.parse_args(["-db=wordpress", "--user", "exporter"])

        assert overrides == {"db_name": "wordpress", "db_user": "exporter"}

    def test_unset_flags_are_omitted(self):
        """Test defaults come from Config rather than the parser"""
        assert main.parse_args([]) == {}

    def test_skipwoocommerce_without_value(self):
        """Test bare boolean flag"""
        assert main.parse_args(["-skipwoocommerce"])["skip_woocommerce"] is True

    @pytest.mark.parametrize("value,expected", [("1", True), ("yes", True), ("false", False), ("0", False)])
    def test_parse_bool(self, value, expected):
        assert main.parse_bool(value) is expected

    def test_invalid_boolean_rejected(self):
        """Test an unparseable boolean is a usage error"""
        with pytest.raises(SystemExit) as exc_info:
            main.parse_args(["-skipwoocommerce=maybe"])

        assert exc_info.value.code == 2

    def test_load_config(self):
        """Test flags produce a validated Config"""
        config = main.load_config(["-db", "wordpress", "-user", "exporter", "-port", "3307"])

        assert config.db_name == "wordpress"
        assert config.db_port == 3307
        assert config.table_prefix == "wp_"

    def test_flags_override_environment(self, monkeypatch):
        """Test flags take precedence over environment variables"""
        monkeypatch.setenv("DB_NAME", "from_env")
        monkeypatch.setenv("DB_USER", "exporter")

        assert main.load_config(["-db", "from_flag"]).db_name == "from_flag"
        assert main.load_config([]).db_name == "from_env"


class TestMain:
    """Test the process entry point"""

    def test_missing_database_name(self, capsys):
        """Test startup aborts before serving when -db is missing"""
        with patch("main.uvicorn.run") as mock_run:
            with pytest.raises(SystemExit) as exc_info:
                main.main(["-user", "exporter"])

        assert exc_info.value.code == 1
        assert "flag -db=dbname required!" in capsys.readouterr().err
        mock_run.assert_not_called()

    def test_missing_user(self, capsys):
        """Test startup aborts before serving when -user is missing"""
        with patch("main.uvicorn.run") as mock_run:
            with pytest.raises(SystemExit) as exc_info:
                main.main(["-db", "wordpress"])

        assert exc_info.value.code == 1
        assert "flag -user=username required!" in capsys.readouterr().err
        mock_run.assert_not_called()

    def test_invalid_port(self, capsys):
        """Test invalid values are reported by field"""
        with pytest.raises(SystemExit) as exc_info:
            main.main(["-db", "wordpress", "-user", "exporter", "-port", "99999"])

        assert exc_info.value.code == 1
        assert "invalid configuration for db_port" in capsys.readouterr().err

    def test_starts_server(self):
        """Test a valid configuration starts uvicorn on the metrics port"""
        with patch("main.setup_structured_logging"), \
                patch("main.MetricsServer") as mock_server, \
                patch("main.uvicorn.run") as mock_run:
            main.main(["-db", "wordpress", "-user", "exporter"])

        config = mock_server.call_args.args[0]
        assert config.db_name == "wordpress"
        mock_run.assert_called_once()
        assert mock_run.call_args.kwargs["port"] == 9850
        assert mock_run.call_args.kwargs["host"] == "0.0.0.0"

    def test_startup_failure_exits(self):
        """Test unexpected startup errors exit with status 1"""
        with patch("main.setup_structured_logging"), \
                patch("main.MetricsServer", side_effect=RuntimeError("boom")), \
                patch("main.uvicorn.run") as mock_run:
            with pytest.raises(SystemExit) as exc_info:
                main.main(["-db", "wordpress", "-user", "exporter"])

        assert exc_info.value.code == 1
        mock_run.assert_not_called()
