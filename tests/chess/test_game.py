"""Unit tests for chess_rules/chess/game.py"""

import pytest

from chess_rules.chess.board import Board
from chess_rules.chess.game import Game, color_from_name
from chess_rules.chess.pieces import Color, PieceType
from chess_rules.chess.square import Square
from chess_rules.core.exceptions import GameStateError
from chess_rules.core.log import GameLog
from chess_rules.core.models import GameModel
from chess_rules.core.shared_types import MoveResult, Winner

STANDARD_START = (
    "WHITE,PA2,pA7,RA1*,rA8*,PB2,pB7,NB1,nB8,PC2,pC7,BC1,bC8,PD2,pD7,PE2,pE7,"
    "PF2,pF7,BF1,bF8,PG2,pG7,NG1,nG8,PH2,pH7,RH1*,rH8*,KE1*,kE8*,QD1,qD8"
)


def sq(name: str) -> Square:
    return Square.from_text(name)


def squares(*names: str) -> set[Square]:
    return {sq(name) for name in names}


def game_from(text: str, log: GameLog | None = None) -> Game:
    game = Game(log=log if log is not None else GameLog())
    assert game.import_text(text)
    return game


@pytest.fixture
def new_game(game_log: GameLog) -> Game:
    game = Game(log=game_log)
    game.start_new_game()
    return game


# --- SETUP / EXPORT / IMPORT ---
def test_standard_start_export(new_game: Game) -> None:
    assert new_game.export_text() == STANDARD_START
    assert new_game.color_to_move == Color.WHITE


def test_export_import_round_trip(new_game: Game) -> None:
    text = new_game.export_text()
    other = Game()
    assert other.import_text(text)
    assert other.export_text() == text
    assert other.export_text() == other.export_text()


def test_reset_empties_the_board(new_game: Game, game_log: GameLog) -> None:
    new_game.reset()
    assert new_game.board_text() == ""
    assert new_game.export_text() == "WHITE,"
    assert "Board reset." in game_log.entries


def test_invalid_import_leaves_game_untouched(new_game: Game, game_log: GameLog) -> None:
    assert new_game.execute_move(sq("E2"), sq("E4")) == MoveResult.VALID
    before = new_game.to_model()

    assert not new_game.import_text("PURPLE,KE1")
    assert not new_game.import_text("WHITE,KE1,QE1")
    assert not new_game.import_text("WHITE,KE²,kE8")
    assert not new_game.import_text("WHITE,Ké1,kE8")

    assert new_game.to_model() == before
    assert any(entry.startswith("Import failed") for entry in game_log.entries)


def test_import_sets_side_to_move() -> None:
    game = game_from("black,KE1,ke8")
    assert game.color_to_move == Color.BLACK
    assert game.execute_move(sq("E1"), sq("E2")) == MoveResult.INVALID
    assert game.execute_move(sq("E8"), sq("E7")) == MoveResult.VALID


# --- TURNS ---
def test_first_moves_alternate_sides(new_game: Game) -> None:
    assert new_game.execute_move(sq("D2"), sq("D4")) == MoveResult.VALID
    assert new_game.color_to_move == Color.BLACK
    assert new_game.execute_move(sq("D7"), sq("D5")) == MoveResult.VALID
    assert new_game.color_to_move == Color.WHITE
    assert new_game.piece_letter_at(sq("D4")) == "P"
    assert new_game.piece_letter_at(sq("D5")) == "p"


def test_moving_out_of_turn_is_invalid(new_game: Game, game_log: GameLog) -> None:
    assert new_game.execute_move(sq("E7"), sq("E5")) == MoveResult.INVALID
    assert new_game.color_to_move == Color.WHITE
    assert new_game.export_text() == STANDARD_START
    assert "Invalid move E7-E5: no white piece on E7." in game_log.entries


def test_moving_from_empty_square_is_invalid(new_game: Game) -> None:
    assert new_game.execute_move(sq("E4"), sq("E5")) == MoveResult.INVALID


def test_move_outside_of_piece_rules_is_invalid(new_game: Game) -> None:
    assert new_game.execute_move(sq("E2"), sq("E5")) == MoveResult.INVALID
    assert new_game.execute_move(sq("B1"), sq("B3")) == MoveResult.INVALID


def test_capture_removes_piece() -> None:
    game = game_from("WHITE,KE1,ke8,RA1,nA5")
    assert game.execute_move(sq("A1"), sq("A5")) == MoveResult.VALID
    assert game.export_text() == "BLACK,KE1,kE8,RA5"


# --- LEGAL MOVES ---
def test_legal_moves_in_start_position(new_game: Game) -> None:
    assert new_game.legal_moves(sq("B1")) == squares("A3", "C3")
    assert new_game.legal_moves(sq("E2")) == squares("E3", "E4")
    assert new_game.legal_moves(sq("E1")) == set()
    assert new_game.legal_moves(sq("E4")) == set()


def test_pinned_piece_cannot_move() -> None:
    game = game_from("WHITE,KE1,BE2,rE8,kA8")
    assert game.legal_moves(sq("E2")) == set()
    assert game.execute_move(sq("E2"), sq("D3")) == MoveResult.INVALID


def test_in_check_only_moves_that_resolve_it() -> None:
    game = game_from("WHITE,KE1,rE8,kA8,NB1")
    assert game.legal_moves(sq("B1")) == set()
    assert game.legal_moves(sq("E1")) == squares("D1", "D2", "F1", "F2")


def test_king_cannot_step_next_to_the_other_king() -> None:
    game = game_from("WHITE,KE1,kE3")
    assert game.legal_moves(sq("E1")) == squares("D1", "F1")


def test_legal_moves_never_leave_the_king_in_check(new_game: Game) -> None:
    for from_name, to_name in [("F2", "F3"), ("E7", "E5"), ("G2", "G4")]:
        new_game.execute_move(sq(from_name), sq(to_name))

    for piece in new_game.board.pieces_of(Color.BLACK):
        for destination in new_game.legal_moves(piece.square):
            copy = Game(board=new_game.board.copy(), color_to_move=Color.BLACK)
            assert copy.execute_move(piece.square, destination) != MoveResult.INVALID
            assert not copy.is_in_check(Color.BLACK)


# --- EN PASSANT ---
def test_en_passant_capture() -> None:
    game = game_from("BLACK,KE1,kE8,PE5,pD7")
    assert game.execute_move(sq("D7"), sq("D5")) == MoveResult.VALID
    assert game.legal_moves(sq("E5")) == squares("E6", "D6")
    assert game.to_model().en_passant_square == "D5"

    assert game.execute_move(sq("E5"), sq("D6")) == MoveResult.VALID
    assert not game.has_piece_at(sq("D5"))
    assert game.export_text() == "BLACK,KE1,kE8,PD6"


def test_en_passant_only_right_after_the_double_push() -> None:
    game = game_from("BLACK,KE1,kE8,PE5,pD7,pH7")
    assert game.execute_move(sq("D7"), sq("D5")) == MoveResult.VALID
    assert game.execute_move(sq("E1"), sq("F1")) == MoveResult.VALID
    assert game.execute_move(sq("H7"), sq("H6")) == MoveResult.VALID
    assert game.legal_moves(sq("E5")) == squares("E6")
    assert game.to_model().en_passant_square is None


def test_no_en_passant_after_single_steps() -> None:
    game = game_from("BLACK,KE1,kE8,PE5,pD6")
    assert game.execute_move(sq("D6"), sq("D5")) == MoveResult.VALID
    assert game.legal_moves(sq("E5")) == squares("E6")


# --- CASTLING ---
def test_castling_moves_king_and_rook() -> None:
    game = game_from("WHITE,KE1*,RH1*,RA1*,kE8*")
    assert squares("C1", "G1") <= game.legal_moves(sq("E1"))

    assert game.execute_move(sq("E1"), sq("G1")) == MoveResult.VALID
    assert game.export_text() == "BLACK,KG1,RF1,RA1*,kE8*"


def test_queen_side_castling_for_black() -> None:
    game = game_from("BLACK,KE1,kE8*,rA8*")
    assert game.execute_move(sq("E8"), sq("C8")) == MoveResult.VALID
    assert game.export_text() == "WHITE,KE1,kC8,rD8"


def test_moving_the_king_loses_castling_rights() -> None:
    game = game_from("WHITE,KE1*,RH1*,kA8")
    assert game.execute_move(sq("E1"), sq("E2")) == MoveResult.VALID
    assert game.execute_move(sq("A8"), sq("A7")) == MoveResult.VALID
    assert game.execute_move(sq("E2"), sq("E1")) == MoveResult.VALID
    assert game.execute_move(sq("A7"), sq("A8")) == MoveResult.VALID
    assert sq("G1") not in game.legal_moves(sq("E1"))
    assert game.export_text() == "WHITE,KE1,RH1*,kA8"


def test_moving_the_rook_loses_castling_rights() -> None:
    game = game_from("WHITE,KE1*,RH1*,kA8")
    assert game.execute_move(sq("H1"), sq("H2")) == MoveResult.VALID
    assert game.export_text() == "BLACK,KE1*,RH2,kA8"


def test_no_castling_through_check() -> None:
    game = game_from("WHITE,KE1*,RH1*,rF8,kA8")
    assert game.legal_moves(sq("E1")) == squares("D1", "D2", "E2")
    assert game.execute_move(sq("E1"), sq("G1")) == MoveResult.INVALID


# --- PROMOTION ---
def test_promotion(game_log: GameLog) -> None:
    game = game_from("WHITE,KE1,kE8,PA7", log=game_log)
    assert game.execute_move(sq("A7"), sq("A8")) == MoveResult.VALID_PROMOTION
    assert game.is_promotable(sq("A8"))
    assert game.color_to_move == Color.BLACK

    assert game.promote(sq("A8"), PieceType.QUEEN) == MoveResult.VALID
    assert game.piece_letter_at(sq("A8")) == "Q"
    assert game.piece_type_name(sq("A8")) == "queen"
    assert not game.is_promotable(sq("A8"))
    assert game.is_in_check(Color.BLACK)
    assert "Black is in check." in game_log.entries


@pytest.mark.parametrize("piece_type", [PieceType.KING, PieceType.PAWN])
def test_invalid_promotion_choice(piece_type: PieceType) -> None:
    game = game_from("WHITE,KE1,kE8,PA7")
    game.execute_move(sq("A7"), sq("A8"))
    assert game.promote(sq("A8"), piece_type) == MoveResult.INVALID
    assert game.piece_letter_at(sq("A8")) == "P"


def test_promotion_without_pawn_on_last_rank_is_invalid(new_game: Game) -> None:
    assert new_game.promote(sq("A2"), PieceType.QUEEN) == MoveResult.INVALID
    assert new_game.promote(sq("A8"), PieceType.QUEEN) == MoveResult.INVALID


def test_promoted_rook_counts_as_moved() -> None:
    game = game_from("BLACK,KE1*,kA8,pH2")
    assert game.execute_move(sq("H2"), sq("H1")) == MoveResult.VALID_PROMOTION
    assert game.promote(sq("H1"), PieceType.ROOK) == MoveResult.VALID
    assert game.is_in_check(Color.WHITE)
    assert game.board_text() == "KE1*,kA8,rH1"


def test_promotion_to_checkmate() -> None:
    game = game_from("WHITE,KA1,kH8,pH7,pG7,PB7")
    assert game.execute_move(sq("B7"), sq("B8")) == MoveResult.VALID_PROMOTION
    assert game.promote(sq("B8"), PieceType.QUEEN) == MoveResult.CHECKMATE_WHITE
    assert game.winner() == Winner.WHITE


# --- CHECK / CHECKMATE / DRAW ---
def test_fools_mate(new_game: Game, game_log: GameLog) -> None:
    for from_name, to_name in [("F2", "F3"), ("E7", "E5"), ("G2", "G4")]:
        assert new_game.execute_move(sq(from_name), sq(to_name)) == MoveResult.VALID

    assert new_game.execute_move(sq("D8"), sq("H4")) == MoveResult.CHECKMATE_BLACK
    assert new_game.is_checkmate(Color.WHITE)
    assert new_game.winner() == Winner.BLACK
    assert "White is in check." in game_log.entries
    assert game_log.entries[-1] == "Checkmate! White loses."


def test_check_is_logged_once(game_log: GameLog) -> None:
    game = game_from("WHITE,KE1,kE8,RA1,PH2,pH7", log=game_log)
    assert game.execute_move(sq("A1"), sq("A8")) == MoveResult.VALID
    assert game.is_in_check(Color.BLACK)
    assert game.last_side_in_check == Color.BLACK
    assert game.execute_move(sq("E8"), sq("E7")) == MoveResult.VALID
    assert game.last_side_in_check is None
    assert game_log.entries.count("Black is in check.") == 1


def test_stalemate(game_log: GameLog) -> None:
    game = game_from("WHITE,KF7,QG5,kH8", log=game_log)
    assert game.execute_move(sq("G5"), sq("G6")) == MoveResult.DRAW
    assert game.is_draw(Color.BLACK)
    assert not game.is_checkmate(Color.BLACK)
    assert game.winner() == Winner.DRAW
    assert game_log.entries[-1] == "Draw (stalemate)."


def test_no_winner_without_kings() -> None:
    game = game_from("WHITE,PA2")
    assert game.winner() is None
    assert not game.is_draw(Color.BLACK)


def test_game_continues(new_game: Game) -> None:
    assert new_game.winner() is None
    assert not new_game.is_in_check(Color.WHITE)


# --- MODEL CONVERSION ---
def test_model_round_trip() -> None:
    game = game_from("BLACK,KE1,kE8,PE5,pD7")
    game.set_player_name(Color.WHITE, "Alice")
    game.execute_move(sq("D7"), sq("D5"))

    model = game.to_model()
    assert model == GameModel(
        position_text="WHITE,KE1,kE8,PE5,pD5",
        en_passant_square="D5",
        last_side_in_check=None,
        players={"white": "Alice"},
    )

    restored = Game.from_model(model)
    assert restored.to_model() == model
    assert restored.en_passant_pawn is restored.board.piece_at(sq("D5"))
    assert restored.player_name(Color.WHITE) == "Alice"
    assert restored.player_name(Color.BLACK) is None
    assert sq("D6") in restored.legal_moves(sq("E5"))


@pytest.mark.parametrize(
    "model",
    [
        GameModel(position_text="PURPLE,KE1"),
        GameModel(position_text="WHITE,KE1,kE8", en_passant_square="D5"),
        GameModel(position_text="WHITE,KE1,kE8", en_passant_square=""),
        GameModel(position_text="WHITE,KE1,kE8", en_passant_square="E1"),
        GameModel(position_text="WHITE,KE1,kE8", last_side_in_check="green"),
        GameModel(position_text="WHITE,KE1,kE8", players={"red": "Bob"}),
    ],
)
def test_invalid_model_raises(model: GameModel) -> None:
    with pytest.raises(GameStateError):
        Game.from_model(model)


# --- NAMING HELPERS ---
def test_color_from_name() -> None:
    assert color_from_name("white") == Color.WHITE
    assert color_from_name("BLACK") == Color.BLACK
    with pytest.raises(GameStateError):
        color_from_name("blue")


def test_larger_board_start() -> None:
    game = Game(board=Board(size=9))
    game.start_new_game()
    assert game.piece_letter_at(sq("E9")) == "k"
    assert game.piece_letter_at(sq("A8")) == "p"
    assert game.legal_moves(sq("E2")) == squares("E3", "E4")
