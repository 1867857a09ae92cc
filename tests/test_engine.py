import pytest

from matrixcipher.controller.engine import apply_forward, apply_backward


class TestEngine:
    def test_forward_then_backward(self, series, plaintext):
        encrypted = apply_forward(series, 3, plaintext)
        assert encrypted == series.encrypt_series[3] @ plaintext
        assert apply_backward(series, 3, encrypted).allclose(plaintext)

    @pytest.mark.parametrize("index", [-1, 8])
    def test_index_out_of_range(self, series, plaintext, index):
        with pytest.raises(IndexError):
            apply_forward(series, index, plaintext)
        with pytest.raises(IndexError):
            apply_backward(series, index, plaintext)
