from klondike.cards import Card
from klondike.deck import build_deck
from klondike.stacks import FOUNDATIONS, STOCK, TABLEAU
from klondike.table import Table


def layout_table(stacks, hidden=()):
    """Build a 52-card table from ``{stack_id: [card ids bottom to top]}``.

    Listed cards are face up unless named in ``hidden``; every card not
    listed goes to the stock face down.
    """
    deck = {card.id: card for card in build_deck()}
    layout = {}
    for stack_id, card_ids in stacks.items():
        cards = []
        for card_id in card_ids:
            card = deck.pop(card_id)
            card.face_up = card_id not in hidden and stack_id != STOCK
            cards.append(card)
        layout[stack_id] = cards
    layout.setdefault(STOCK, [])
    layout[STOCK] = list(deck.values()) + layout[STOCK]
    return Table(layout)


SUITS = ["clubs", "diamonds", "spades", "hearts"]
RANKS = ["ace", "2", "3", "4", "5", "6", "7", "8", "9", "10", "jack", "queen"]


def kings_left_table():
    """Foundations hold ace..queen of each suit; the four kings sit on tableau 1-4."""
    stacks = {}
    for foundation, suit in zip(FOUNDATIONS, SUITS):
        stacks[foundation] = [f"{rank}_of_{suit}" for rank in RANKS]
    for tableau, suit in zip(TABLEAU, SUITS):
        stacks[tableau] = [f"king_of_{suit}"]
    return layout_table(stacks)


def card(card_id, face_up=True):
    result = Card.from_id(card_id)
    result.face_up = face_up
    return result
