"""Tests for the command line entry point."""
import json
import pytest
from unittest.mock import Mock, patch

import main
from putsizer.calculator import CalculationResult, SizingRequest
from putsizer.errors import InvalidStopLoss, NetworkError
from putsizer.market_data import Quote
from putsizer.strategy import PositionSizer


@pytest.fixture
def config_path(tmp_path):
    path = tmp_path / "config.json"
    path.write_text(json.dumps({
        "premium_provider": "estimate",
        "large_position_warning": 1000,
        "logging": {"level": "INFO", "file_path": str(tmp_path / "logs" / "test.log")}
    }))
    return str(path)


@pytest.fixture
def calculator():
    calculator = Mock()
    outcome = PositionSizer().size(current_price=60.0, strike=57.0, premium=3.0, max_loss=500.0)
    calculator.size_position.return_value = CalculationResult(
        request=SizingRequest('AAPL', 57.0, 500.0, '1w'),
        quote=Quote(symbol='AAPL', price=60.0),
        expiration='20261016',
        premium=3.0,
        premium_source='estimate',
        outcome=outcome
    )
    with patch.object(main.ProtectivePutCalculator, 'from_config', return_value=calculator):
        yield calculator


class TestMain:
    """Test cases for main()."""

    def test_prints_report(self, config_path, calculator, capsys):
        code = main.main([
            'aapl', '--stop-loss', '57', '--max-loss', '500',
            '--holding-period', '2w', '--config', config_path
        ])

        assert code == main.EXIT_OK
        calculator.size_position.assert_called_once_with(
            ticker='aapl', stop_loss=57.0, max_loss=500.0, holding_period='2w'
        )
        output = capsys.readouterr().out
        assert "# Protective Put Strategy Results" in output
        assert "- **Shares**: 66" in output
        assert "Large position warning" not in output

    def test_default_holding_period_from_config(self, config_path, calculator):
        main.main(['AAPL', '--stop-loss', '57', '--max-loss', '500', '--config', config_path])

        assert calculator.size_position.call_args.kwargs['holding_period'] == '1w'

    def test_large_position_warning(self, config_path, calculator, capsys):
        main.main(['AAPL', '--stop-loss', '57', '--max-loss', '5000', '--config', config_path])

        assert "Large position warning" in capsys.readouterr().out

    def test_input_error_exit_code(self, config_path, calculator, capsys):
        calculator.size_position.side_effect = InvalidStopLoss("Stop loss must be below current price")

        code = main.main(['AAPL', '--stop-loss', '70', '--max-loss', '500', '--config', config_path])

        assert code == main.EXIT_INPUT_ERROR
        assert "below current price" in capsys.readouterr().out

    def test_network_error_exit_code(self, config_path, calculator, capsys):
        calculator.size_position.side_effect = NetworkError("Timed out fetching stock price")

        code = main.main(['AAPL', '--stop-loss', '57', '--max-loss', '500', '--config', config_path])

        assert code == main.EXIT_NETWORK_ERROR
        assert "Network error" in capsys.readouterr().out

    def test_missing_config_file(self, tmp_path, capsys):
        missing = str(tmp_path / "missing.json")

        code = main.main(['AAPL', '--stop-loss', '57', '--max-loss', '500', '--config', missing])

        assert code == main.EXIT_INPUT_ERROR
        assert "Configuration file not found" in capsys.readouterr().out

    def test_estimate_flag_forwarded(self, config_path, calculator):
        main.main([
            'AAPL', '--stop-loss', '57', '--max-loss', '500', '--config', config_path, '--estimate'
        ])

        assert main.ProtectivePutCalculator.from_config.call_args.kwargs['force_estimate'] is True

    @pytest.mark.parametrize("flag,value", [
        ('--max-loss', 'nan'),
        ('--max-loss', 'inf'),
        ('--stop-loss', 'nan'),
    ])
    def test_non_finite_argument_is_input_error(self, config_path, capsys, flag, value):
        """NaN or infinity on the command line ends in exit 1, not a traceback."""
        argv = ['AAPL', '--stop-loss', '57', '--max-loss', '500', '--config', config_path]
        argv[argv.index(flag) + 1] = value

        code = main.main(argv)

        assert code == main.EXIT_INPUT_ERROR
        assert "Calculation failed" in capsys.readouterr().out

    def test_unwritable_log_path(self, tmp_path, capsys):
        """A log path under a regular file is reported as a configuration error."""
        blocker = tmp_path / "not_a_dir"
        blocker.write_text("")
        path = tmp_path / "config.json"
        path.write_text(json.dumps({
            "premium_provider": "estimate",
            "logging": {"level": "INFO", "file_path": str(blocker / "test.log")}
        }))

        code = main.main(['AAPL', '--stop-loss', '57', '--max-loss', '500', '--config', str(path)])

        assert code == main.EXIT_INPUT_ERROR
        assert "cannot open log file" in capsys.readouterr().out

    def test_unexpected_error_logged_as_critical(self, config_path, calculator):
        calculator.size_position.side_effect = RuntimeError("boom")

        with patch.object(main.SizerLogger, 'log_critical') as log_critical:
            with pytest.raises(RuntimeError):
                main.main(['AAPL', '--stop-loss', '57', '--max-loss', '500', '--config', config_path])

        log_critical.assert_called_once()

    def test_required_arguments(self):
        with pytest.raises(SystemExit):
            main.main(['AAPL'])


class TestLoadConfiguration:
    """Tests for configuration discovery."""

    def test_falls_back_to_environment(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv('TRADIER_API_TOKEN', 'env_token')

        config = main.load_configuration(None)

        assert config.tradier_credentials.api_token == 'env_token'

    def test_explicit_path(self, config_path):
        config = main.load_configuration(config_path)

        assert config.premium_provider == 'estimate'
