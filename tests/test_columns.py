"""Unit tests for column addresses and cell writes."""

import pytest

from qbsheets.columns import MAXIMUM_COLUMN_NUMBER, ColumnAddress
from qbsheets.models import CellWrite, PlayerTeamPair


class TestColumnAddress:
    """Tests for converting column numbers to letters."""

    @pytest.mark.parametrize(
        'number,expected',
        [(1, 'A'), (3, 'C'), (26, 'Z'), (27, 'AA'), (52, 'AZ'), (53, 'BA'), (677, 'ZA'), (702, 'ZZ')],
    )
    def test_str(self, number, expected):
        """Test column letters at the single/double letter boundaries."""
        assert str(ColumnAddress(number)) == expected

    def test_every_column_parses_back(self):
        """Test every printed column parses to the same number."""
        for number in range(1, MAXIMUM_COLUMN_NUMBER + 1):
            assert ColumnAddress.parse(str(ColumnAddress(number))).number == number

    @pytest.mark.parametrize('number', [0, -1, 703])
    def test_out_of_range_rejected(self, number):
        """Test column numbers outside A..ZZ raise ValueError."""
        with pytest.raises(ValueError):
            ColumnAddress(number)

    def test_from_letter(self):
        """Test single letters, in either case."""
        assert ColumnAddress.from_letter('C').number == 3
        assert ColumnAddress.from_letter('m').number == 13

    @pytest.mark.parametrize('letter', ['', 'AB', '1', '?'])
    def test_from_letter_invalid(self, letter):
        """Test anything but one letter is rejected."""
        with pytest.raises(ValueError):
            ColumnAddress.from_letter(letter)

    @pytest.mark.parametrize('text', ['ABC', 'A1', '', 'É'])
    def test_parse_invalid(self, text):
        """Test parse only accepts one or two letters."""
        with pytest.raises(ValueError):
            ColumnAddress.parse(text)

    def test_add_crosses_into_two_letters(self):
        """Test Z + 1 is AA."""
        assert str(ColumnAddress.from_letter('Z').add(1)) == 'AA'
        assert str(ColumnAddress.from_letter('C').add(6)) == 'I'

    def test_subtract(self):
        """Test AA - 1 is Z."""
        assert str(ColumnAddress.parse('AA').subtract(1)) == 'Z'

    def test_add_past_zz_raises(self):
        """Test arithmetic can't leave the A..ZZ range."""
        with pytest.raises(ValueError):
            ColumnAddress(MAXIMUM_COLUMN_NUMBER).add(1)
        with pytest.raises(ValueError):
            ColumnAddress(1).subtract(1)

    def test_ordering_and_equality(self):
        """Test columns compare by position."""
        assert ColumnAddress(3) == ColumnAddress.from_letter('C')
        assert ColumnAddress(26) < ColumnAddress(27)


class TestCellWrite:
    """Tests for A1 ranges and batch update bodies."""

    def test_single_cell_range(self):
        write = CellWrite.single('ROUND 1', ColumnAddress.from_letter('C'), 4, 15)
        assert write.range == "'ROUND 1'!C4"
        assert write.to_value_range() == {'range': "'ROUND 1'!C4", 'values': [[15]]}

    def test_row_run_range(self):
        """Test a run along a row ends len - 1 columns to the right."""
        write = CellWrite.along_row('Round 1', ColumnAddress.from_letter('I'), 4, [True, False, True])
        assert write.range == "'Round 1'!I4:K4"
        assert write.to_value_range()['values'] == [[True, False, True]]
        assert 'majorDimension' not in write.to_value_range()

    def test_column_run_range(self):
        """Test a run down a column is sent with the COLUMNS major dimension."""
        write = CellWrite.along_column('ROSTERS', ColumnAddress(1), 2, ['Alice', 'Andy', 'Ann', 'Abe'])
        assert write.range == "'ROSTERS'!A2:A5"
        assert write.to_value_range() == {
            'range': "'ROSTERS'!A2:A5",
            'values': [['Alice', 'Andy', 'Ann', 'Abe']],
            'majorDimension': 'COLUMNS',
        }

    def test_cells_expand_in_direction(self):
        row_write = CellWrite.along_row('S', ColumnAddress(2), 3, ['x', 'y'])
        column_write = CellWrite.along_column('S', ColumnAddress(2), 3, ['x', 'y'])
        assert [(str(c), r, v) for c, r, v in row_write.cells()] == [('B', 3, 'x'), ('C', 3, 'y')]
        assert [(str(c), r, v) for c, r, v in column_write.cells()] == [('B', 3, 'x'), ('B', 4, 'y')]


class TestPlayerTeamPair:
    """Tests for players without a team."""

    def test_lone_player_is_own_team(self):
        pair = PlayerTeamPair('7', 'Solo')
        assert pair.team_id == '7'
        assert not pair.is_on_team

    def test_player_on_team(self):
        pair = PlayerTeamPair('2', 'Alice', 'alpha')
        assert pair.team_id == 'alpha'
        assert pair.is_on_team
