import math

import pytest

from conic_scene.lexer import tokenize
from conic_scene.numbers import SymbolicNumber
from conic_scene.parser import evaluate_expression, parse_number


def test_tokenize_reports_columns():
    assert tokenize('2*PI') == [('NUMBER', '2', 1), ('STAR', '*', 2), ('ID', 'pi', 3)]
    assert tokenize(' 1.5e-3 ') == [('NUMBER', '1.5e-3', 2)]


def test_tokenize_rejects_unknown_characters():
    with pytest.raises(SyntaxError) as exc:
        tokenize('2 % 3')
    assert '[col 3]' in str(exc.value)


@pytest.mark.parametrize(
    'text, expected',
    [
        ('3', 3.0),
        ('-2.5', -2.5),
        ('.5', 0.5),
        ('1e3', 1000.0),
        ('sqrt(3)', math.sqrt(3)),
        ('2*pi', 2 * math.pi),
        ('PI/2', math.pi / 2),
        ('e', math.e),
        ('sin(pi/2)', 1.0),
        ('cos(0) + tan(0)', 1.0),
        ('2^3^2', 512.0),
        ('-2^2', -4.0),
        ('(1 + 2) * 3', 9.0),
        ('1 - 2 - 3', -4.0),
        ('8 / 2 / 2', 2.0),
        ('2^-1', 0.5),
        ('  4  ', 4.0),
    ],
)
def test_evaluate_expression(text, expected):
    assert evaluate_expression(text) == pytest.approx(expected)


@pytest.mark.parametrize(
    'text',
    ['', '   ', None, '1/0', 'sqrt(-1)', '(-8)^(1/3)', '10^400', '2 +', 'abc', 'sqrt 2', '(1', '1)', '3 4'],
)
def test_invalid_input_evaluates_to_none(text):
    assert evaluate_expression(text) is None


def test_parse_number_keeps_source_text():
    number = parse_number('  sqrt(3) ')
    assert isinstance(number, SymbolicNumber)
    assert number.text == 'sqrt(3)'
    assert float(number) == pytest.approx(1.7320508)
    assert str(number) == 'sqrt(3)'


def test_syntax_error_points_at_column():
    with pytest.raises(SyntaxError) as exc:
        parse_number('2 +')
    message = str(exc.value)
    assert message.startswith('[col 4] unexpected end of expression')
    assert message.splitlines()[-1] == '       ^'


def test_unknown_name_is_reported():
    with pytest.raises(SyntaxError) as exc:
        parse_number('2*x')
    assert "unknown name 'x'" in str(exc.value)


def test_display_rounds_for_input_fields():
    assert parse_number('sqrt(3)').display() == '1.7321'
    assert parse_number('5/2').display() == '2.5'
    assert parse_number('3').display() == '3'
    assert parse_number('-0.00001').display() == '0'
    assert parse_number('pi').display(digits=2) == '3.14'


def test_unary_minus_applies_after_power():
    assert evaluate_expression('-2^2') == -4.0
    assert evaluate_expression('(-2)^2') == 4.0
    assert evaluate_expression('-(2^2)') == evaluate_expression('-2^2')
