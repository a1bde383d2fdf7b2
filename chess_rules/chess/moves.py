"""
Geometry/Base movement and attacking rules

Key idea: Use strategy pattern to define pseudo-legal move sets for each piece type.
A second table of strategies defines which squares a piece threatens: those are used for
"is this square attacked?" questions (check detection, castling through attacked squares).

Legality (not leaving your own king in check) is checked later by Game
"""

from typing import Callable, Optional, Protocol

from chess_rules.chess.castling import CastlingSide, CastlingSquares
from chess_rules.chess.pieces import Color, Piece, PieceType
from chess_rules.chess.square import Square


class Board(Protocol):
    """Just the parts the movement strategies need"""

    size: int

    def piece_at(self, square: Square) -> Optional[Piece]: ...
    def is_square_attacked(self, square: Square, by_color: Color) -> bool: ...


Vector = tuple[int, int]

STRAIGHTS: list[Vector] = [(1, 0), (-1, 0), (0, 1), (0, -1)]
DIAGONALS: list[Vector] = [(1, 1), (-1, 1), (1, -1), (-1, -1)]
KNIGHT_DELTAS: list[Vector] = [
    (2, 1),
    (2, -1),
    (-2, 1),
    (-2, -1),
    (1, 2),
    (1, -2),
    (-1, 2),
    (-1, -2),
]
KING_DELTAS: list[Vector] = STRAIGHTS + DIAGONALS


# --- MOVEMENT PRIMITIVES ---
def raycasting_move(piece: Piece, board: Board, directions: list[Vector]) -> set[Square]:
    """
    Raycasting algorithm
    -----

    ---
    The main trick we use to check the 'line of sight of a piece'.
    We define move directions and move along them until we hit another piece or
    the edge of the board. The first occupied square is included only if it holds an opponent's piece.
    """
    moves: set[Square] = set()
    for df, dr in directions:
        target_square = piece.square
        while True:
            target_square = target_square.offset(df, dr)
            if not target_square.is_within_bounds(board.size):
                break

            piece_found = board.piece_at(target_square)
            if piece_found is not None:
                # only need to add the first occupied square found if it is the opponent's: then it can be captured.
                if piece_found.color != piece.color:
                    moves.add(target_square)
                break

            moves.add(target_square)
    return moves


def single_step_move(piece: Piece, board: Board, deltas: list[Vector]) -> set[Square]:
    """Raycasting is for sliding pieces. This is the equivalent for kings and knights that just jump by a fixed offset"""
    moves: set[Square] = set()
    for df, dr in deltas:
        target_square = piece.square.offset(df, dr)
        if not target_square.is_within_bounds(board.size):
            continue

        piece_found = board.piece_at(target_square)
        if piece_found is None or piece_found.color != piece.color:
            moves.add(target_square)
    return moves


# --- PAWN GEOMETRY ---
def pawn_direction(color: Color) -> int:
    """White moves UP the board, Black moves DOWN"""
    return 1 if color == Color.WHITE else -1


def pawn_starting_rank(color: Color, size: int) -> int:
    return 2 if color == Color.WHITE else size - 1


def promotion_rank(color: Color, size: int) -> int:
    return size if color == Color.WHITE else 1


def en_passant_rank(color: Color, size: int) -> int:
    """The fifth rank counted from your own side of the board"""
    return size - 3 if color == Color.WHITE else 4


def pawn_capture_squares(piece: Piece, board: Board) -> list[Square]:
    """Both diagonal-forward squares that are still on the board"""
    direction = pawn_direction(piece.color)
    candidates = [piece.square.offset(df, direction) for df in (-1, 1)]
    return [square for square in candidates if square.is_within_bounds(board.size)]


# --- MOVEMENT RULES ---
def candidate_pawn_moves(piece: Piece, board: Board) -> set[Square]:
    """
    A pawn:
    - moves by a single square forward (if empty)
    - It can move by two in their first move (so when on their starting rank), if both squares are empty
    - takes diagonally, only where an opponent's piece actually stands

    NOTE: En passant depends on the previous move, so Game takes care of it
    """
    moves: set[Square] = set()
    direction = pawn_direction(piece.color)

    one_step = piece.square.offset(0, direction)
    if one_step.is_within_bounds(board.size) and board.piece_at(one_step) is None:
        moves.add(one_step)

        two_steps = piece.square.offset(0, 2 * direction)
        on_starting_rank = piece.square.rank == pawn_starting_rank(piece.color, board.size)
        if on_starting_rank and two_steps.is_within_bounds(board.size) and board.piece_at(two_steps) is None:
            moves.add(two_steps)

    for target_square in pawn_capture_squares(piece, board):
        piece_found = board.piece_at(target_square)
        if piece_found is not None and piece_found.color != piece.color:
            moves.add(target_square)
    return moves


def candidate_knight_moves(piece: Piece, board: Board) -> set[Square]:
    """Knights always move such that |delta_rank| + |delta_file| = 3"""
    return single_step_move(piece, board, KNIGHT_DELTAS)


def candidate_bishop_moves(piece: Piece, board: Board) -> set[Square]:
    """Bishops move diagonally: |delta_rank| = |delta_file|"""
    return raycasting_move(piece, board, DIAGONALS)


def candidate_rook_moves(piece: Piece, board: Board) -> set[Square]:
    """Rooks move either horizontally or vertically"""
    return raycasting_move(piece, board, STRAIGHTS)


def candidate_queen_moves(piece: Piece, board: Board) -> set[Square]:
    """
    The Queen combines the rook moves (horizontal + vertical movements) and bishop moves (diagonal movement)
    """
    return candidate_bishop_moves(piece, board) | candidate_rook_moves(piece, board)


def king_base_moves(piece: Piece, board: Board) -> set[Square]:
    """The king can move by a single square at the time."""
    return single_step_move(piece, board, KING_DELTAS)


def candidate_king_moves(piece: Piece, board: Board) -> set[Square]:
    """Single steps + the castling destinations that are currently allowed"""
    return king_base_moves(piece, board) | castling_moves(piece, board)


# -- STRATEGY PATTERN: MOVEMENT RULES ---
CandidateMovesFn = Callable[[Piece, Board], set[Square]]
MOVEMENT_RULES: dict[PieceType, CandidateMovesFn] = {
    PieceType.PAWN: candidate_pawn_moves,
    PieceType.KNIGHT: candidate_knight_moves,
    PieceType.BISHOP: candidate_bishop_moves,
    PieceType.ROOK: candidate_rook_moves,
    PieceType.QUEEN: candidate_queen_moves,
    PieceType.KING: candidate_king_moves,
}


# --- THREAT RULES ---
def pawn_threats(piece: Piece, board: Board) -> set[Square]:
    """
    Pawns only ever threaten diagonally. Pushes forward never capture, so they never attack a square.

    NOTE: the diagonals count as threatened even when empty (that is what matters when castling through them).
    This is stricter than taking the pawn's base move set, which only has a diagonal when something stands there
    and would also count the push squares: a pawn can never capture straight ahead, so pushes are left out.
    """
    return {
        square
        for square in pawn_capture_squares(piece, board)
        if (occupant := board.piece_at(square)) is None or occupant.color != piece.color
    }


# -- STRATEGY PATTERN: THREAT RULES ---
# The king only threatens its single steps. Using its castling moves here would make
# two kings evaluating each other's castling rights recurse forever.
THREAT_RULES: dict[PieceType, CandidateMovesFn] = {
    PieceType.PAWN: pawn_threats,
    PieceType.KNIGHT: candidate_knight_moves,
    PieceType.BISHOP: candidate_bishop_moves,
    PieceType.ROOK: candidate_rook_moves,
    PieceType.QUEEN: candidate_queen_moves,
    PieceType.KING: king_base_moves,
}


# -- CASTLING MOVES ---
def legal_castling_squares(king: Piece, board: Board) -> list[CastlingSquares]:
    """
    Find the castling options for the given king
    ---

    **you are allowed to castle if**

    * The king has not moved yet.
    * The rook in that corner exists, is yours, and has not moved yet.
    * All squares in between king and rook are empty.
    * The king does not stand on, pass through, or land on an attacked square (so you cannot castle out of check).
    """
    if king.has_moved:
        return []

    options: list[CastlingSquares] = []
    opponent_color = king.color.opponent
    for side in CastlingSide:
        squares = CastlingSquares.for_king(king.square, side, board.size)
        if squares is None:
            continue

        rook = board.piece_at(squares.rook_from)
        if rook is None or rook.type != PieceType.ROOK:
            continue
        if rook.color != king.color or rook.has_moved:
            continue

        if any(board.piece_at(square) is not None for square in squares.squares_between):
            continue

        if any(board.is_square_attacked(square, opponent_color) for square in squares.king_path):
            continue

        options.append(squares)
    return options


def castling_moves(king: Piece, board: Board) -> set[Square]:
    return {squares.king_to for squares in legal_castling_squares(king, board)}


# -- PAWN PROMOTION --
PROMOTION_OPTIONS: list[PieceType] = [
    PieceType.KNIGHT,
    PieceType.BISHOP,
    PieceType.ROOK,
    PieceType.QUEEN,
]


def is_on_promotion_rank(piece: Piece, size: int) -> bool:
    """check if the piece is a pawn that reached the final rank from its own point of view"""
    return piece.type == PieceType.PAWN and piece.square.rank == promotion_rank(piece.color, size)
