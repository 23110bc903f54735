import fractions

import pytest

import neumalang.errors
import neumalang.nodes
import neumalang.parser


Fraction = fractions.Fraction


def test_sequence_of_notes () -> None:

	"""Plain notes become a flat sequence."""

	tree = neumalang.parser.parse("C D E")

	assert isinstance(tree, neumalang.nodes.Sequence)
	assert [n.pitch.name for n in tree.elements] == ["C", "D", "E"]
	assert [n.offset for n in tree.elements] == [0, 2, 4]
	assert all(n.duration is None for n in tree.elements)


def test_degree_pitch () -> None:

	"""Numeric pitches are degrees with accidentals counted; a sign makes them relative."""

	tree = neumalang.parser.parse("0 -3 2## 4b +5#")
	pitches = [n.pitch for n in tree.elements]

	assert pitches[0] == neumalang.nodes.Pitch(degree=0)
	assert pitches[1] == neumalang.nodes.Pitch(degree=-3, relative=True)
	assert pitches[2] == neumalang.nodes.Pitch(degree=2, sharps=2)
	assert pitches[3] == neumalang.nodes.Pitch(degree=4, sharps=-1)
	assert pitches[4] == neumalang.nodes.Pitch(degree=5, sharps=1, relative=True)


def test_relative_octave_marks () -> None:

	"""+o/-o set the octave delta; plain o<n> stays a shift."""

	tree = neumalang.parser.parse("2+o1 -1 -o3 0o-1")
	notes = tree.elements

	assert len(notes) == 3
	assert notes[0].octave_delta == 1
	assert notes[1].octave_delta == -3
	assert notes[1].pitch == neumalang.nodes.Pitch(degree=-1, relative=True)
	assert notes[2].octave_delta is None
	assert notes[2].octave_shift == -1


def test_note_name_octave () -> None:

	"""A written octave is split from the spelling, negative octaves included."""

	note = neumalang.parser.parse("Bb3").elements[0]

	assert note.pitch == neumalang.nodes.Pitch(name="Bb", octave=3)

	tree = neumalang.parser.parse("C-1 G#-1")

	assert [n.pitch for n in tree.elements] == [
		neumalang.nodes.Pitch(name="C", octave=-1),
		neumalang.nodes.Pitch(name="G#", octave=-1),
	]


def test_duration_marks () -> None:

	"""Absolute, relative and dotted marks."""

	tree = neumalang.parser.parse("C:3/2 D*2 E/4 F. G:1..")
	durations = [n.duration for n in tree.elements]

	assert durations[0] == neumalang.nodes.Duration(Fraction(3, 2), relative=False)
	assert durations[1] == neumalang.nodes.Duration(Fraction(2), relative=True)
	assert durations[2] == neumalang.nodes.Duration(Fraction(1, 4), relative=True)
	assert durations[3] == neumalang.nodes.Duration(Fraction(1), relative=True, dots=1)
	assert durations[4] == neumalang.nodes.Duration(Fraction(1), relative=False, dots=2)


def test_duration_resolve () -> None:

	"""Relative marks scale with the beat length; dots extend by halves."""

	assert neumalang.nodes.Duration(Fraction(2)).resolve(Fraction(1, 2)) == 1
	assert neumalang.nodes.Duration(Fraction(3), relative=False).resolve(Fraction(1, 2)) == 3
	assert neumalang.nodes.Duration(Fraction(1), dots=1).resolve(Fraction(1)) == Fraction(3, 2)
	assert neumalang.nodes.Duration(Fraction(1), dots=2).resolve(Fraction(1)) == Fraction(7, 4)


def test_modifiers () -> None:

	"""Dynamics, articulations and octave shifts attach to the preceding note."""

	note = neumalang.parser.parse("2:1/2 @ff @staccato o1 @accent o1").elements[0]

	assert note.dynamic == "ff"
	assert note.articulations == ("staccato", "accent")
	assert note.octave_shift == 2
	assert note.duration == neumalang.nodes.Duration(Fraction(1, 2), relative=False)


def test_duplicate_articulation_kept_once () -> None:

	"""Repeated articulations are not duplicated."""

	note = neumalang.parser.parse("C@tenuto@tenuto").elements[0]

	assert note.articulations == ("tenuto",)


def test_rest () -> None:

	"""Rests carry only a duration."""

	tree = neumalang.parser.parse("~ ~:2")

	assert tree.elements[0] == neumalang.nodes.Rest(None, 0)
	assert tree.elements[1].duration == neumalang.nodes.Duration(Fraction(2), relative=False)


def test_group_with_duration () -> None:

	"""A group holds its elements and its own duration mark."""

	group = neumalang.parser.parse("(C D E):2").elements[0]

	assert isinstance(group, neumalang.nodes.Group)
	assert len(group.elements) == 3
	assert group.duration == neumalang.nodes.Duration(Fraction(2), relative=False)


def test_nested_group () -> None:

	"""Groups nest."""

	group = neumalang.parser.parse("(C (D E))").elements[0]

	assert isinstance(group.elements[1], neumalang.nodes.Group)
	assert group.duration is None


def test_parallel_voices () -> None:

	"""A bracket splits voices on '|'."""

	parallel = neumalang.parser.parse("[C D | E:2 | (G A)]").elements[0]

	assert isinstance(parallel, neumalang.nodes.Parallel)
	assert len(parallel.voices) == 3
	assert all(isinstance(v, neumalang.nodes.Sequence) for v in parallel.voices)
	assert len(parallel.voices[0].elements) == 2
	assert isinstance(parallel.voices[2].elements[0], neumalang.nodes.Group)


def test_empty_text_is_empty_sequence () -> None:

	"""No elements is still a valid sequence."""

	assert neumalang.parser.parse("   ").elements == ()


def test_parse_is_repeatable () -> None:

	"""The same text always gives an equal tree."""

	text = "C (D E):2 [F | A ~] 0@p"

	assert neumalang.parser.parse(text) == neumalang.parser.parse(text)


@pytest.mark.parametrize("text, offset, expected", [
	("C )", 2, "element"),
	("(C D", 4, "')'"),
	("()", 1, "element"),
	("[C | ]", 5, "element"),
	("[C D", 4, "'|' or ']'"),
	("C:2:3", 3, "a single duration mark"),
	("C@loud", 1, "dynamic or articulation"),
	("C@p@f", 3, "a single dynamic"),
	("~@ff", 1, "element"),
	("C:0", 1, "positive duration"),
	("C/0", 1, "positive duration"),
	("[C]:2", 3, "element"),
	("0+o1-o1", 4, "a single relative octave"),
	("C\u3000)", 4, "element"),
	("(C\u3000", 5, "')'"),
])
def test_parse_errors (text: str, offset: int, expected: str) -> None:

	"""Malformed input raises ParseError at the offending token."""

	with pytest.raises(neumalang.errors.ParseError) as info:
		neumalang.parser.parse(text)

	assert info.value.offset == offset
	assert info.value.expected == expected


def test_lex_error_passes_through () -> None:

	"""Lexer failures surface from parse()."""

	with pytest.raises(neumalang.errors.LexError):
		neumalang.parser.parse("C & D")
