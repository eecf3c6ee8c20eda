import numpy as np
import pytest

from vibewatch.dsp.fft import real_spectrum
from vibewatch.dsp.similarity import change_percent, cosine_similarity
from vibewatch.util.errors import DegenerateSpectrumError, SpectrumLengthError


def test_real_spectrum_of_dc_window() -> None:
    spec = real_spectrum([1.0, 1.0, 1.0, 1.0])
    assert np.allclose(spec, [4.0, 0.0, 0.0, 0.0])


def test_real_spectrum_of_cosine_window_is_unscaled() -> None:
    spec = real_spectrum([1.0, 0.0, -1.0, 0.0])
    assert np.allclose(spec, [0.0, 2.0, 0.0, 2.0])


def test_real_spectrum_drops_imaginary_part_of_sine() -> None:
    spec = real_spectrum(np.array([0.0, 1.0, 0.0, -1.0]))
    assert spec.shape == (4,)
    assert np.allclose(spec, 0.0)


def test_real_spectrum_is_deterministic() -> None:
    rng = np.random.default_rng(3)
    window = rng.normal(size=600)
    first = real_spectrum(window)
    second = real_spectrum(window.copy())
    assert first.dtype == np.float64
    assert np.array_equal(first, second)
    assert np.allclose(first, np.fft.fft(window).real)


def test_real_spectrum_rejects_bad_shapes() -> None:
    with pytest.raises(ValueError):
        real_spectrum([])
    with pytest.raises(ValueError):
        real_spectrum(np.ones((2, 2)))


def test_self_similarity_is_one() -> None:
    rng = np.random.default_rng(11)
    for _ in range(5):
        v = rng.normal(size=32)
        assert cosine_similarity(v, v) == pytest.approx(1.0)
        assert cosine_similarity(v, -v) == pytest.approx(1.0)


def test_similarity_of_orthogonal_vectors_is_zero() -> None:
    assert cosine_similarity(np.array([0.0, 2.0, 0.0, 2.0]), np.array([4.0, 0.0, 0.0, 0.0])) == 0.0


def test_change_percent_stays_in_range() -> None:
    rng = np.random.default_rng(5)
    for _ in range(50):
        a = rng.normal(size=16)
        b = rng.normal(size=16)
        pct = change_percent(cosine_similarity(a, b))
        assert 0.0 <= pct <= 100.0


def test_zero_energy_spectrum_is_degenerate() -> None:
    with pytest.raises(DegenerateSpectrumError):
        cosine_similarity(np.zeros(4), np.ones(4))
    with pytest.raises(DegenerateSpectrumError):
        cosine_similarity(np.ones(4), np.zeros(4))


def test_length_mismatch_is_reported() -> None:
    with pytest.raises(SpectrumLengthError):
        cosine_similarity(np.ones(4), np.ones(3))


def _tone(n: int = 600, phase: float = 0.0, amplitude: float = 1.0) -> np.ndarray:
    t = np.arange(n) / 600.0
    return amplitude * np.sin(2.0 * np.pi * 25.0 * t + phase)


def test_zero_phase_sine_spectrum_is_exactly_zero() -> None:
    assert np.array_equal(real_spectrum([0.0, 1.0, 0.0, -1.0]), np.zeros(4))
    assert np.array_equal(real_spectrum(_tone()), np.zeros(600))
    assert np.array_equal(real_spectrum(_tone(amplitude=1e-12)), np.zeros(600))


def test_similarity_ignores_overall_scale() -> None:
    rng = np.random.default_rng(7)
    v = rng.normal(size=64)
    assert cosine_similarity(v, 1e-12 * v) == pytest.approx(1.0)
    assert cosine_similarity(1e-150 * v, 1e-150 * v) == pytest.approx(1.0)
    assert cosine_similarity(v, 1e80 * v) == pytest.approx(1.0)
    assert cosine_similarity(1e200 * v, 1e200 * v) == pytest.approx(1.0)


def test_tiny_and_huge_tones_compare_as_unchanged() -> None:
    for amplitude in (1e-12, 1e80):
        spec = real_spectrum(_tone(phase=np.pi / 4, amplitude=amplitude))
        assert change_percent(cosine_similarity(spec, spec.copy())) == pytest.approx(0.0, abs=1e-9)


def test_non_finite_spectrum_is_degenerate() -> None:
    with pytest.raises(DegenerateSpectrumError):
        cosine_similarity(np.array([1.0, np.inf, 0.0]), np.ones(3))
    with pytest.raises(DegenerateSpectrumError):
        cosine_similarity(np.ones(3), np.array([np.nan, 1.0, 0.0]))
