import logging

import pytest

from matrixcipher.config import CipherConfig, PlaybackConfig, LoggingConfig
from matrixcipher.controller.playback import PlaybackController
from matrixcipher.logging_config import setup_logging, STEP_TRACE_LOGGER
from matrixcipher.model.errors import InvalidParameters, InvalidDimension
from matrixcipher.model.matrix import Matrix
from matrixcipher.session import CipherSession


class TestConfig:
    def test_defaults(self):
        assert CipherConfig().dimension == 16
        assert CipherConfig().num_steps == 32
        assert PlaybackConfig().step_delay_ms == 100

    def test_from_dict(self):
        config = CipherConfig.from_dict({"dimension": 4, "num_steps": 3, "seed": 9})
        assert config.to_dict() == {"dimension": 4, "num_steps": 3, "seed": 9}

    @pytest.mark.parametrize("data", [{"dimension": 1}, {"num_steps": 0}])
    def test_invalid_cipher_config(self, data):
        with pytest.raises(InvalidParameters):
            CipherConfig.from_dict(data)

    def test_invalid_playback_config(self):
        with pytest.raises(InvalidParameters):
            PlaybackConfig.from_dict({"step_delay_ms": -1})


class TestCipherSession:
    def test_defaults(self):
        session = CipherSession(CipherConfig(dimension=4, num_steps=5, seed=1))
        assert session.plaintext == Matrix.identity(4)
        assert session.series.num_steps == 5

    def test_seed_is_reproducible(self):
        a = CipherSession(CipherConfig(dimension=4, num_steps=5, seed=3))
        b = CipherSession(CipherConfig(dimension=4, num_steps=5, seed=3))
        assert a.series.encrypt_product == b.series.encrypt_product

    def test_regenerate_replaces_series(self):
        session = CipherSession(CipherConfig(dimension=4, num_steps=5, seed=3))
        old = session.series
        new = session.regenerate()
        assert new is session.series
        assert new is not old

    def test_decrypt_final_ciphertext(self):
        session = CipherSession(CipherConfig(dimension=6, num_steps=20, seed=5))
        assert session.decrypt(session.final_ciphertext()).allclose(session.plaintext)

    def test_plaintext_dimension_checked(self):
        with pytest.raises(InvalidDimension):
            CipherSession(CipherConfig(dimension=4), plaintext=Matrix.identity(3))

    def test_create_controller(self, scheduler):
        session = CipherSession(CipherConfig(dimension=3, num_steps=4, seed=2))
        controller = session.create_controller(scheduler=scheduler)
        assert isinstance(controller, PlaybackController)
        controller.goto_end()
        assert controller.current_matrix().allclose(session.final_ciphertext())

    def test_reset(self):
        session = CipherSession(CipherConfig(dimension=3, num_steps=4, seed=2))
        session.reset()
        assert session.config == CipherConfig()
        assert session.plaintext.size == 16
        assert session.series.num_steps == 32


class TestLogging:
    @pytest.fixture(autouse=True)
    def restore_loggers(self):
        yield
        # Close file handlers and hand the loggers back to the default setup
        for name in ("matrixcipher", STEP_TRACE_LOGGER):
            logger = logging.getLogger(name)
            for handler in list(logger.handlers):
                logger.removeHandler(handler)
                handler.close()
            logger.setLevel(logging.NOTSET)
            logger.propagate = True

    def test_session_messages_reach_log_file(self, tmp_path):
        log_file = tmp_path / "cipher.log"
        logger = setup_logging(LoggingConfig(level=logging.INFO, log_file=str(log_file)))
        assert logger.level == logging.INFO
        assert len(logger.handlers) == 2
        CipherSession(CipherConfig(dimension=3, num_steps=2, seed=0))
        for handler in logger.handlers:
            handler.flush()
        assert "Generated key series" in log_file.read_text(encoding="utf-8")

    def test_step_trace_off_by_default(self, tmp_path, scheduler):
        log_file = tmp_path / "cipher.log"
        setup_logging(LoggingConfig(level=logging.DEBUG, log_file=str(log_file)))
        session = CipherSession(CipherConfig(dimension=3, num_steps=2, seed=0))
        session.create_controller(scheduler=scheduler).next()
        for handler in logging.getLogger("matrixcipher").handlers:
            handler.flush()
        text = log_file.read_text(encoding="utf-8")
        assert "Random rotation" in text
        assert STEP_TRACE_LOGGER not in text

    def test_step_trace_in_own_file(self, tmp_path, scheduler):
        log_file = tmp_path / "cipher.log"
        trace_file = tmp_path / "steps.log"
        setup_logging(LoggingConfig(
            level=logging.INFO, log_file=str(log_file), trace_steps=True, trace_file=str(trace_file)
        ))
        session = CipherSession(CipherConfig(dimension=3, num_steps=2, seed=0))
        session.create_controller(scheduler=scheduler).next()
        for name in ("matrixcipher", STEP_TRACE_LOGGER):
            for handler in logging.getLogger(name).handlers:
                handler.flush()

        trace = trace_file.read_text(encoding="utf-8")
        assert "Step 0/2" in trace
        assert "Generated key series" not in trace
        assert "Step 0/2" not in log_file.read_text(encoding="utf-8")

    def test_step_trace_with_shared_handlers(self, tmp_path, scheduler):
        log_file = tmp_path / "cipher.log"
        setup_logging(LoggingConfig(level=logging.WARNING, log_file=str(log_file), trace_steps=True))
        session = CipherSession(CipherConfig(dimension=3, num_steps=2, seed=0))
        session.create_controller(scheduler=scheduler).next()
        for handler in logging.getLogger("matrixcipher").handlers:
            handler.flush()
        text = log_file.read_text(encoding="utf-8")
        assert "Step 0/2" in text
        assert "Generated key series" not in text
