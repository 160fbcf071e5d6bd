import random

import pytest

from wordsy.core.quiz_builder import build, resolve_kind
from wordsy.core.records import QuestionKind, QuizWord

WORDS = [
    QuizWord(id=1, text="apple", language="en"),
    QuizWord(id=2, text="river", language="en"),
    QuizWord(id=3, text="mountain", language="en"),
]


def choice_entry(**overrides):
    entry = {
        "type": "multipleChoice",
        "question": "Which fruit is red?",
        "correctAnswer": "apple",
        "options": ["apple", "banana", "kiwi", "grape"],
    }
    entry.update(overrides)
    return entry


def test_choice_question_with_four_options_is_kept_unchanged():
    questions = build([choice_entry()], WORDS)

    assert len(questions) == 1
    question = questions[0]
    assert question.kind == QuestionKind.MULTIPLE_CHOICE
    assert question.options == ["apple", "banana", "kiwi", "grape"]
    assert question.correct_answer == "apple"
    assert question.word.id == 1


def test_choice_question_with_three_options_is_dropped():
    assert build([choice_entry(options=["apple", "banana", "kiwi"])], WORDS) == []


def test_correct_answer_must_be_an_exact_option():
    assert build([choice_entry(correctAnswer="Apple")], WORDS) == []


def test_fill_in_blank_needs_four_options_too():
    entry = choice_entry(type="fillInBlank", sentence="I ate an ___ today.", options=["apple", "pear"])
    assert build([entry], WORDS) == []

    entry["options"] = ["apple", "pear", "plum", "fig"]
    question = build([entry], WORDS)[0]
    assert question.kind == QuestionKind.FILL_IN_BLANK
    assert question.blank_position == entry["sentence"].index("_")


def test_missing_required_fields_are_dropped():
    entries = [
        {"type": "multipleChoice", "question": "No answer", "options": ["a", "b", "c", "d"]},
        {"type": "multipleChoice", "correctAnswer": "a", "options": ["a", "b", "c", "d"]},
        "not a dict",
        None,
        choice_entry(),
    ]
    questions = build(entries, WORDS)
    assert len(questions) == 1


@pytest.mark.parametrize("tag,kind", [
    ("multipleChoice", QuestionKind.MULTIPLE_CHOICE),
    ("fill_in_blank", QuestionKind.FILL_IN_BLANK),
    ("dragAndDrop", QuestionKind.DRAG_AND_DROP),
    ("audio", QuestionKind.AUDIO),
    ("somethingElse", QuestionKind.MULTIPLE_CHOICE),
    (None, QuestionKind.MULTIPLE_CHOICE),
])
def test_resolve_kind(tag, kind):
    assert resolve_kind(tag) == kind


def test_unknown_type_is_treated_as_multiple_choice():
    questions = build([choice_entry(type="riddle")], WORDS)
    assert questions[0].kind == QuestionKind.MULTIPLE_CHOICE


def test_word_is_matched_case_insensitively_in_prompt():
    entry = choice_entry(question="What flows through the RIVER valley?", correctAnswer="water",
                         options=["water", "sand", "rock", "air"])
    assert build([entry], WORDS)[0].word.id == 2


def test_unmatched_question_falls_back_to_first_candidate():
    entry = choice_entry(question="Pick a colour", correctAnswer="blue", options=["blue", "red", "green", "pink"])
    assert build([entry], WORDS)[0].word.id == 1


def test_empty_candidates_yield_nothing():
    assert build([choice_entry()], []) == []


def test_drag_and_drop_lists_are_independent_permutations():
    pairs = [{"term": f"term{i}", "definition": f"definition{i}"} for i in range(8)]
    entry = {
        "type": "dragAndDrop",
        "question": "Match the mountain words",
        "correctAnswer": "all pairs",
        "matchPairs": pairs,
    }
    rng = random.Random(7)

    aligned_everywhere = True
    for _ in range(20):
        question = build([entry], WORDS, rng)[0]
        assert sorted(question.terms) == sorted(p["term"] for p in pairs)
        assert sorted(question.definitions) == sorted(p["definition"] for p in pairs)
        assert len(question.match_pairs) == 8

        aligned = all(
            question.terms[i][len("term"):] == question.definitions[i][len("definition"):]
            for i in range(8)
        )
        aligned_everywhere = aligned_everywhere and aligned

    assert not aligned_everywhere


def test_drag_and_drop_without_pairs_is_dropped():
    entry = {"type": "dragAndDrop", "question": "Match", "correctAnswer": "x", "matchPairs": []}
    assert build([entry], WORDS) == []


def test_generated_emojis_are_kept():
    questions = build([choice_entry(questionEmojis="🍎🍏🍐")], WORDS)
    assert questions[0].question_emojis == "🍎🍏🍐"


def test_answer_is_hidden_until_revealed():
    question = build([choice_entry()], WORDS)[0]
    assert "correct_answer" not in question.to_dict()
    assert question.to_dict(reveal_answer=True)["correct_answer"] == "apple"
