from __future__ import annotations

import itertools
from datetime import date, timedelta

import pytest

from event_planner.planner.catalog import default_catalog
from event_planner.planner.engine import generate_timeline, get_questions_for_event_type
from event_planner.planner.errors import TimelineError, TimelineValidationError

THANK_YOU_TASK = "Send thank-you notes and follow-up"


def _by_title(tasks: list[dict]) -> dict[str, dict]:
    return {task["task"]: task for task in tasks}


def _without_ids(tasks: list[dict]) -> list[dict]:
    return [{key: value for key, value in task.items() if key != "id"} for task in tasks]


def test_lebanese_wedding_with_zaffe() -> None:
    timeline = generate_timeline(
        "Lebanese Wedding",
        "2025-12-20",
        200,
        30000,
        {"Traditional Zaffe Procession": True},
    )
    tasks = _by_title(timeline["tasks"])

    zaffe = tasks["Organize traditional Zaffe procession"]
    assert zaffe["estimated_cost"] == 3120
    assert zaffe["recommended_cost"] == 4368
    assert zaffe["deadline"] == "2025-09-20"
    assert zaffe["suggested_vendor_category"] == "Entertainment"

    venue = tasks["Research and book venue"]
    assert venue["deadline"] == "2025-06-20"
    assert venue["estimated_cost"] == 13650
    assert venue["recommended_cost"] == 19110

    assert tasks[THANK_YOU_TASK]["deadline"] == "2026-01-03"
    assert "Design and send formal invitations" in tasks
    assert "Send invitations" not in tasks
    assert "Arrange Dabke performance and instruction" not in tasks
    assert len(timeline["tasks"]) == 19

    breakdown = {item["category"]: item for item in timeline["cost_breakdown"]}
    assert breakdown["Venues"]["percentage"] == 35
    assert sum(item["percentage"] for item in timeline["cost_breakdown"]) == 100


def test_birthday_without_answers_gets_base_tasks_only() -> None:
    timeline = generate_timeline("Birthday Party", "2025-06-01", 30, 1000, {})
    tasks = _by_title(timeline["tasks"])

    assert len(tasks) == 13
    assert tasks["Send invitations"]["deadline"] == "2025-05-04"
    assert tasks["Send invitations"]["estimated_cost"] == 120
    assert tasks["Research and book venue"]["deadline"] == "2025-02-01"
    assert tasks["Research and book venue"]["estimated_cost"] == 240
    assert tasks["Research and book venue"]["recommended_cost"] == 240

    venues = timeline["cost_breakdown"][0]
    assert venues["category"] == "Venues"
    assert venues["percentage"] == 30


def test_birthday_answers_pick_variants() -> None:
    answers = {
        "type": "Children's Birthday Party",
        "essentials": ["Entertainment & Activities", "Custom Birthday Cake"],
        "extras": ["Party Favors & Gifts"],
    }
    tasks = _by_title(
        generate_timeline("Birthday Party", "2025-06-01", 30, 1000, answers)["tasks"]
    )

    entertainment = tasks["Book entertainment and activities"]
    assert entertainment["estimated_cost"] == 160
    assert entertainment["description"].startswith("Arrange age-appropriate")
    assert tasks["Prepare party favors and gift bags"]["estimated_cost"] == 192
    assert tasks["Order custom birthday cake"]["estimated_cost"] == 40


def test_corporate_event_costs_and_month_end_deadlines() -> None:
    timeline = generate_timeline(
        "Corporate Conference",
        "2026-03-31",
        120,
        50000,
        {"content": ["Keynote Speakers"]},
    )
    tasks = _by_title(timeline["tasks"])

    keynote = tasks["Secure keynote speakers and presenters"]
    assert keynote["estimated_cost"] == 13000
    assert keynote["recommended_cost"] == 15600

    assert tasks["Research and book venue"]["deadline"] == "2025-11-30"
    assert tasks["Define event vision and objectives"]["deadline"] == "2025-09-30"
    assert tasks["Send invitations"]["deadline"] == "2026-02-17"
    assert tasks["Send invitations"]["estimated_cost"] == 312
    assert "Develop event agenda and content" in tasks
    assert "Hire corporate event photographer" not in tasks


def test_unknown_event_type_gets_only_base_tasks() -> None:
    timeline = generate_timeline(
        "Some Unknown Festival",
        "2025-10-10",
        80,
        5000,
        {"Keynote Speakers": True, "Traditional Zaffe Procession": True},
    )
    titles = [task["task"] for task in timeline["tasks"]]

    base_titles = {
        template.task
        for template in default_catalog().base_tasks
        if template.when is None or "Send invitations" == template.task
    }
    assert set(titles) == base_titles


@pytest.mark.parametrize(
    "guest_count,months_before",
    [(150, 4), (151, 6)],
)
def test_large_event_threshold_is_strict(guest_count: int, months_before: int) -> None:
    tasks = _by_title(
        generate_timeline("Graduation Party", "2025-12-15", guest_count, 8000)["tasks"]
    )
    expected = date(2025, 12 - months_before, 15).isoformat()
    assert tasks["Research and book venue"]["deadline"] == expected


def test_tasks_sorted_with_base_tasks_first_on_ties() -> None:
    timeline = generate_timeline(
        "Lebanese Wedding",
        "2025-12-20",
        80,
        20000,
        {"Traditional Lebanese Cuisine": True, "Dabke Performance": True},
    )
    titles = [task["task"] for task in timeline["tasks"]]
    deadlines = [task["deadline"] for task in timeline["tasks"]]

    assert deadlines == sorted(deadlines)
    # Same two-month deadline: base templates precede wedding templates.
    assert titles.index("Design and send formal invitations") < titles.index(
        "Arrange Dabke performance and instruction"
    )
    assert titles.index("Plan menu and arrange tastings") < titles.index(
        "Plan honeymoon and post-wedding arrangements"
    )


def test_selecting_every_wedding_option_adds_one_task_per_multi_select_option() -> None:
    questions = get_questions_for_event_type("Lebanese Wedding")
    answers: dict[str, object] = {}
    multi_options: list[str] = []
    for question in questions:
        if question.get("multi_select"):
            answers[question["id"]] = list(question["options"])
            multi_options.extend(question["options"])
        else:
            answers[question["id"]] = question["options"][0]

    plain = generate_timeline("Lebanese Wedding", "2025-12-20", 200, 30000, {})
    full = generate_timeline("Lebanese Wedding", "2025-12-20", 200, 30000, answers)

    assert len(multi_options) == 12
    assert len(full["tasks"]) - len(plain["tasks"]) == len(multi_options)

    wedding_templates = default_catalog().family_tasks["wedding"]
    gated = [template for template in wedding_templates if template.when is not None]
    assert [template.when["fact"] for template in gated] == multi_options


@pytest.mark.parametrize(
    "event_type,family",
    [("Sweet 16", "birthday"), ("Mawlid al-Nabi", "religious"), ("Bar/Bat Mitzvah", "religious")],
)
def test_exact_label_questions_reach_every_family_task(event_type: str, family: str) -> None:
    answers = {
        question["id"]: list(question["options"])
        for question in get_questions_for_event_type(event_type)
    }
    gated = [
        template.task
        for template in default_catalog().family_tasks[family]
        if template.when is not None
    ]

    plain = _by_title(generate_timeline(event_type, "2025-09-14", 60, 5000, {})["tasks"])
    full = _by_title(generate_timeline(event_type, "2025-09-14", 60, 5000, answers)["tasks"])

    assert gated
    assert not set(gated) & set(plain)
    assert set(gated) <= set(full)
    assert len(full) - len(plain) == len(gated)


def test_generation_is_deterministic_apart_from_ids() -> None:
    answers = {"traditions": ["Traditional Cuisine"]}
    args = ("Christmas Celebration", "2025-12-25", 60, 4000, answers)
    first = generate_timeline(*args)
    second = generate_timeline(*args)

    assert _without_ids(first["tasks"]) == _without_ids(second["tasks"])
    assert first["cost_breakdown"] == second["cost_breakdown"]


def test_ids_are_unique_even_when_factory_repeats() -> None:
    ids = itertools.chain(["dup", "dup", "dup"], (f"id-{n}" for n in itertools.count()))
    timeline = generate_timeline(
        "Baptism", "2025-05-10", 40, 3000, id_factory=lambda: next(ids)
    )
    task_ids = [task["id"] for task in timeline["tasks"]]

    assert len(set(task_ids)) == len(task_ids)
    assert task_ids[0] == "dup"


def test_default_ids_are_unique_and_tasks_start_incomplete() -> None:
    timeline = generate_timeline("Lebanese Wedding", "2025-12-20", 200, 30000)
    task_ids = [task["id"] for task in timeline["tasks"]]

    assert len(set(task_ids)) == len(task_ids)
    assert all(task["completed"] is False for task in timeline["tasks"])


@pytest.mark.parametrize(
    "event_type",
    [
        "Lebanese Wedding",
        "Corporate Conference",
        "Sweet 16",
        "Easter Celebration",
        "Trade Show",
    ],
)
@pytest.mark.parametrize("guest_count", [1, 50, 150, 151, 450])
@pytest.mark.parametrize("budget", [1, 999.99, 30000])
def test_timeline_invariants(event_type: str, guest_count: int, budget: float) -> None:
    event_date = date(2026, 2, 28)
    options = [
        option
        for question in get_questions_for_event_type(event_type)
        for option in question["options"]
    ]
    timeline = generate_timeline(
        event_type,
        event_date.isoformat(),
        guest_count,
        budget,
        {option: True for option in options},
    )
    tasks = timeline["tasks"]

    deadlines = [task["deadline"] for task in tasks]
    assert deadlines == sorted(deadlines)

    post_event = [task for task in tasks if task["deadline"] > event_date.isoformat()]
    assert [task["task"] for task in post_event] == [THANK_YOU_TASK]
    assert post_event[0]["deadline"] == (event_date + timedelta(weeks=2)).isoformat()

    assert len({task["id"] for task in tasks}) == len(tasks)
    for task in tasks:
        assert task["estimated_cost"] >= 0
        assert task["recommended_cost"] >= task["estimated_cost"]

    breakdown = timeline["cost_breakdown"]
    assert sum(item["percentage"] for item in breakdown) == 100
    for item in breakdown:
        assert 0 <= item["estimated_cost"] <= item["recommended_cost"]


@pytest.mark.parametrize(
    "kwargs,message",
    [
        ({"event_type": ""}, "event_type"),
        ({"event_type": "   "}, "event_type"),
        ({"guest_count": 0}, "guest_count must be greater than 0"),
        ({"guest_count": -3}, "guest_count must be greater than 0"),
        ({"guest_count": True}, "guest_count must be an integer"),
        ({"guest_count": 12.5}, "guest_count must be an integer"),
        ({"budget": 0}, "budget must be greater than 0"),
        ({"budget": -100}, "budget must be greater than 0"),
        ({"budget": float("nan")}, "budget must be greater than 0"),
        ({"budget": "1000"}, "budget must be a number"),
        ({"event_date": "2025-02-30"}, "ISO date string"),
        ({"event_date": "9999-12-25"}, "event_date is out of the supported range"),
        ({"event_date": "0001-03-01"}, "event_date is out of the supported range"),
        ({"answers": ["Dabke Performance"]}, "answers must be an object"),
    ],
)
def test_invalid_input_is_rejected(kwargs: dict, message: str) -> None:
    params = {
        "event_type": "Lebanese Wedding",
        "event_date": "2025-12-20",
        "guest_count": 100,
        "budget": 10000,
        "answers": {},
    }
    params.update(kwargs)

    with pytest.raises(TimelineValidationError, match=message):
        generate_timeline(**params)


def test_id_factory_that_never_changes_is_rejected() -> None:
    with pytest.raises(TimelineError, match="duplicate id"):
        generate_timeline("Baptism", "2025-05-10", 40, 3000, id_factory=lambda: "same")
