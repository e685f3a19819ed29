from dataset_curator.parsers import extract_conversation, extract_cv, extract_email, extract_faq, extract_json


CV_TEXT = """Jane Doe
jane.doe@example.com | +1 555 123 4567
EDUCATION
BSc Computer Science, MIT, 2015
WORK EXPERIENCE
Software Engineer at Acme, 2016-2020
SKILLS
Python, SQL, Docker"""


class TestExtractCv:
    def test_sections_and_contact(self):
        candidates = extract_cv(CV_TEXT)
        assert [candidate.tags for candidate in candidates] == [
            ["cv", "education"],
            ["cv", "experience"],
            ["cv", "skills"],
            ["cv", "contact"],
        ]
        assert candidates[0].completion == "BSc Computer Science, MIT, 2015"
        assert candidates[1].completion == "Software Engineer at Acme, 2016-2020"
        assert candidates[2].completion == "Python, SQL, Docker"

    def test_contact_details(self):
        contact = extract_cv(CV_TEXT)[-1]
        assert "Name: Jane Doe" in contact.completion
        assert "Email: jane.doe@example.com" in contact.completion
        assert "Phone: +1 555 123 4567" in contact.completion

    def test_first_occurrence_of_section_wins(self):
        candidates = extract_cv("EDUCATION\nFirst school\nEDUCATION\nSecond school")
        assert len(candidates) == 1
        assert candidates[0].completion == "First school"

    def test_empty_section_is_skipped(self):
        candidates = extract_cv("EDUCATION\nSKILLS\nPython")
        assert [candidate.tags[1] for candidate in candidates] == ["skills"]


class TestExtractFaq:
    def test_pairs_questions_with_answers(self):
        candidates = extract_faq("Q: What is X?\nA: X is a thing.\nQ: What is Y?\nA: Y is another\nthing.")
        assert [(c.prompt, c.completion) for c in candidates] == [
            ("What is X?", "X is a thing."),
            ("What is Y?", "Y is another\nthing."),
        ]

    def test_question_without_answer_is_ignored(self):
        assert extract_faq("Q: Anyone there?") == []


class TestExtractConversation:
    def test_user_assistant_turns(self):
        text = (
            "User: How do I reset my password?\n"
            "Assistant: Click the reset link.\n"
            "User: Thanks!\n"
            "AI: You're welcome."
        )
        candidates = extract_conversation(text)
        assert [(c.prompt, c.completion) for c in candidates] == [
            ("How do I reset my password?", "Click the reset link."),
            ("Thanks!", "You're welcome."),
        ]
        assert all(c.tags == ["conversation"] for c in candidates)

    def test_unanswered_turn_is_dropped(self):
        assert extract_conversation("Customer: Is anyone there?") == []


class TestExtractJson:
    def test_synonyms(self):
        candidates = extract_json('[{"question":"Q1","answer":"A1"}]')
        assert [(c.prompt, c.completion, c.tags) for c in candidates] == [("Q1", "A1", ["json"])]

    def test_jsonl_with_tags(self):
        text = '{"input": "Hi there", "output": "Hello!"}\n{"prompt": "A", "completion": "B", "tags": ["x"]}'
        candidates = extract_json(text)
        assert [(c.prompt, c.completion) for c in candidates] == [("Hi there", "Hello!"), ("A", "B")]
        assert candidates[0].tags == ["json"]
        assert candidates[1].tags == ["x"]

    def test_string_tags_are_split(self):
        candidates = extract_json('[{"prompt": "A", "response": "B", "tags": "one, two"}]')
        assert candidates[0].tags == ["one", "two"]

    def test_single_pretty_printed_object(self):
        candidates = extract_json('{\n  "question": "What?",\n  "answer": "That."\n}')
        assert [(c.prompt, c.completion) for c in candidates] == [("What?", "That.")]

    def test_records_without_both_fields_are_skipped(self):
        candidates = extract_json('[{"prompt": "only a prompt"}, "not an object", {"prompt": "p", "output": "o"}]')
        assert [(c.prompt, c.completion) for c in candidates] == [("p", "o")]

    def test_malformed_json(self):
        assert extract_json("[{broken") == []

    def test_deeply_nested_json(self):
        assert extract_json("[" * 100000) == []


class TestExtractEmail:
    def test_subject_and_body(self):
        text = "From: alice@example.com\nSubject: Quarterly report\n\nHi team,\nThe report is attached."
        candidates = extract_email(text)
        assert len(candidates) == 1
        assert candidates[0].prompt == "Email about: Quarterly report"
        assert candidates[0].completion == "Hi team,\nThe report is attached."
        assert candidates[0].tags == ["email"]

    def test_missing_body(self):
        assert extract_email("From: alice@example.com\nSubject: Ping") == []

    def test_missing_subject(self):
        assert extract_email("From: alice@example.com\n\nHello") == []
