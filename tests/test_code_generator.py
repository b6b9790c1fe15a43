"""
Tests for random short code generation.
"""
import pytest

from qrlink_app.services.code_generator import CodeGenerator, UNAMBIGUOUS_ALPHABET


class TestAlphabet:
    """The alphabet leaves out characters that are easy to misread"""

    def test_excludes_confusable_characters(self):
        for char in "01lIoO":
            assert char not in UNAMBIGUOUS_ALPHABET

    def test_size_and_uniqueness(self):
        assert len(UNAMBIGUOUS_ALPHABET) == 56
        assert len(set(UNAMBIGUOUS_ALPHABET)) == len(UNAMBIGUOUS_ALPHABET)

    def test_is_alphanumeric(self):
        assert UNAMBIGUOUS_ALPHABET.isalnum()


class TestCodeGenerator:

    @pytest.mark.parametrize("length", [1, 5, 7, 12])
    def test_generates_requested_length(self, length):
        code = CodeGenerator().generate(length)

        assert len(code) == length
        assert set(code) <= set(UNAMBIGUOUS_ALPHABET)

    def test_codes_vary_between_calls(self):
        generator = CodeGenerator()

        codes = {generator.generate(7) for _ in range(200)}

        # 56**7 possibilities, 200 draws should essentially never repeat
        assert len(codes) > 190

    def test_custom_alphabet(self):
        code = CodeGenerator(alphabet="ab").generate(20)

        assert set(code) <= {"a", "b"}

    @pytest.mark.parametrize("length", [0, -3])
    def test_non_positive_length_fails_fast(self, length):
        with pytest.raises(ValueError):
            CodeGenerator().generate(length)

    def test_empty_alphabet_rejected(self):
        with pytest.raises(ValueError):
            CodeGenerator(alphabet="")
