from random import Random

from klondike.autofinish import AutoMove, candidate_foundation, eligible_cards, next_auto_move, plan_auto_finish
from klondike.deck import build_deck, deal_layout, shuffle
from klondike.moves import apply_move, draw_from_stock
from klondike.rules import is_valid_foundation, is_victory
from klondike.stacks import FOUNDATIONS
from klondike.table import Table

from helpers import kings_left_table, layout_table


def test_most_recently_exposed_card_goes_first():
    table = layout_table(
        {
            "foundation-1": ["ace_of_clubs"],
            "tableau-1": ["2_of_clubs"],
            "tableau-2": ["ace_of_hearts"],
        }
    )
    assert next_auto_move(table) == AutoMove("ace_of_hearts", "tableau-2", "foundation-2")
    assert plan_auto_finish(table) == [
        AutoMove("ace_of_hearts", "tableau-2", "foundation-2"),
        AutoMove("2_of_clubs", "tableau-1", "foundation-1"),
    ]


def test_relocated_card_counts_as_recently_exposed():
    table = layout_table(
        {
            "foundation-1": ["ace_of_hearts"],
            "tableau-1": ["2_of_hearts"],
            "tableau-2": ["ace_of_spades"],
            "tableau-3": ["3_of_spades"],
        }
    )
    assert next_auto_move(table) == AutoMove("ace_of_spades", "tableau-2", "foundation-2")

    apply_move(table, ["2_of_hearts"], "tableau-3")
    assert next_auto_move(table) == AutoMove("2_of_hearts", "tableau-3", "foundation-1")


def test_illegal_candidates_exclude_their_stack():
    table = layout_table(
        {
            "tableau-1": ["ace_of_diamonds"],
            "tableau-2": ["5_of_spades"],
        }
    )
    assert next_auto_move(table) == AutoMove("ace_of_diamonds", "tableau-1", "foundation-1")
    assert next_auto_move(table, excluded={"tableau-1"}) is None


def test_eligible_cards_are_face_up_stack_tops():
    table = layout_table(
        {
            "waste": ["3_of_hearts"],
            "tableau-1": ["4_of_clubs", "ace_of_spades"],
            "tableau-2": ["9_of_hearts"],
            "foundation-1": ["ace_of_clubs"],
        },
        hidden={"9_of_hearts"},
    )
    ids = [card.id for card in eligible_cards(table)]
    assert ids == ["3_of_hearts", "ace_of_spades"]
    assert [card.id for card in eligible_cards(table, {"waste"})] == ["ace_of_spades"]


def test_candidate_foundation_prefers_matching_suit():
    table = layout_table({"foundation-3": ["ace_of_hearts"], "tableau-1": ["2_of_hearts", "ace_of_clubs"]})
    assert candidate_foundation(table, table.card("2_of_hearts")) == "foundation-3"
    assert candidate_foundation(table, table.card("ace_of_clubs")) == "foundation-1"


def test_plan_does_not_touch_the_table():
    table = kings_left_table()
    before = {stack_id: list(ids) for stack_id, ids in table.stacks.items()}
    plan = plan_auto_finish(table)
    assert len(plan) == 4
    assert table.stacks == before


def test_plan_finishes_a_won_position():
    table = kings_left_table()
    for move in plan_auto_finish(table):
        apply_move(table, [move.card_id], move.destination)
    assert is_victory(table.all_cards())
    assert all(len(table.stacks[stack_id]) == 13 for stack_id in FOUNDATIONS)


def test_auto_finish_terminates_and_keeps_foundations_valid():
    for seed in range(25):
        table = Table(deal_layout(shuffle(build_deck(), rng=Random(seed))))
        for _ in range(30):
            draw_from_stock(table)
            plan = plan_auto_finish(table)
            assert len(plan) <= 52
            for move in plan:
                apply_move(table, [move.card_id], move.destination)
            for stack_id in FOUNDATIONS:
                assert is_valid_foundation(table.cards_in(stack_id))
            assert next_auto_move(table) is None
            table.check_invariants()
