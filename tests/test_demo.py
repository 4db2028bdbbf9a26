from utils.demo import DEMO_CONVERSATIONS, pick_demo_answer, suggested_questions


def test_suggested_questions_answer_themselves():
    for question, _, answer in DEMO_CONVERSATIONS:
        assert pick_demo_answer(question) == answer


def test_keyword_match_is_case_insensitive():
    assert pick_demo_answer("how does PHOTOSYNTHESIS work") == DEMO_CONVERSATIONS[1][2]
    assert pick_demo_answer("what started ww2?") == DEMO_CONVERSATIONS[2][2]


def test_unknown_question_rotates_by_turn():
    answers = [pick_demo_answer("tell me about volcanoes", turn=t) for t in range(4)]
    assert answers == [c[2] for c in DEMO_CONVERSATIONS] + [DEMO_CONVERSATIONS[0][2]]


def test_suggested_questions():
    assert suggested_questions()[0] == "Can you explain the Pythagorean theorem?"
