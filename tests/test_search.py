import io
import random
import time

import pytest

from skyscrapers.board import Board
from skyscrapers.config import SolverConfig
from skyscrapers.generate import generate_solution
from skyscrapers.header import Header
from skyscrapers.solver import Animation, NoSolutionError, Search, SearchState, solve
from skyscrapers.solver.incremental import IncrementalSearch

EXAMPLE_4 = Header.parse("2 2 1 2 2 3 4 1 2 2 1 2 2 3 4 1")
UNSOLVABLE_4 = Header.parse("4 4 4 4 1 1 1 1 4 4 4 4 1 1 1 1")
BOARD_HEADER_3 = Header.parse("3 2 1 1 2 2 3 2 1 1 2 2")


def never() -> bool:
    return False


def always() -> bool:
    return True


def lines_of(board: Board) -> list[list[int]]:
    rows = board.rows()
    return rows + [list(col) for col in zip(*rows)]


def assert_solves(header: Header, board: Board | None) -> None:
    assert board is not None
    full = list(range(1, board.size + 1))
    assert all(sorted(line) == full for line in lines_of(board))
    assert Header.of_board(board) == header


@pytest.mark.parametrize("strategy", ["domains", "incremental"])
def test_example(strategy):
    settings = SolverConfig(strategy=strategy)
    board = solve(EXAMPLE_4, settings=settings, cancelled=never)
    assert_solves(EXAMPLE_4, board)


@pytest.mark.parametrize("strategy", ["domains", "incremental"])
def test_no_solution(strategy):
    settings = SolverConfig(strategy=strategy)
    with pytest.raises(NoSolutionError):
        solve(UNSOLVABLE_4, settings=settings, cancelled=never)


def test_size_one():
    board = solve(Header.parse("1 1 1 1"), cancelled=never)
    assert board == Board.from_rows([[1]])


@pytest.mark.parametrize(
    "rows", [[[1, 2], [2, 1]], [[2, 1], [1, 2]]], ids=["diagonal-2", "diagonal-1"]
)
def test_size_two(rows):
    expected = Board.from_rows(rows)
    assert solve(Header.of_board(expected), cancelled=never) == expected


def test_unsolvable_size_two():
    with pytest.raises(NoSolutionError):
        solve(Header.parse("2 2 2 2 2 2 2 2"), cancelled=never)


@pytest.mark.parametrize(
    "settings",
    [
        SolverConfig(),
        SolverConfig(branching="fewest"),
        SolverConfig(deterministic=False),
        SolverConfig(view_filter=False),
        SolverConfig(line_table_max_size=0),
        SolverConfig(strategy="incremental"),
        SolverConfig(strategy="incremental", line_table_max_size=0),
    ],
    ids=[
        "default",
        "fewest",
        "store-order",
        "no-view-filter",
        "no-line-tables",
        "incremental",
        "incremental-no-line-tables",
    ],
)
@pytest.mark.parametrize("size", [1, 2, 3, 4, 5, 6])
def test_round_trip(settings, size):
    for seed in range(3):
        generated = generate_solution(size, random.Random(seed), cancelled=never)
        header = Header.of_board(generated)
        assert_solves(header, solve(header, settings=settings, cancelled=never))


def test_search_steps():
    search = Search(EXAMPLE_4, cancelled=never)
    assert search.state in (SearchState.SEARCHING, SearchState.SOLVED)
    assert search.run() is SearchState.SOLVED
    assert search.step() is SearchState.SOLVED
    assert_solves(EXAMPLE_4, search.solution)


def test_cancelled():
    settings = SolverConfig(strategy="incremental")
    assert solve(EXAMPLE_4, settings=settings, cancelled=always) is None


def test_animation():
    out = io.StringIO()
    sleeps = []
    animation = Animation(out, 0.1, sleep=sleeps.append)
    board = solve(EXAMPLE_4, cancelled=never, animation=animation)
    assert_solves(EXAMPLE_4, board)

    frames = [frame for frame in out.getvalue().split("\n\n") if frame]
    assert animation.frames >= 2
    assert len(frames) == animation.frames
    assert len(set(frames)) >= 2
    assert sleeps == [0.1] * animation.frames


def test_animation_cancelled():
    out = io.StringIO()
    animation = Animation(out, 0.0, sleep=lambda seconds: None)
    assert solve(EXAMPLE_4, cancelled=always, animation=animation) is None
    assert animation.frames == 1


def test_logging():
    logf = io.StringIO()
    settings = SolverConfig(report_interval=1)
    solve(Header.parse("2 1 1 2 2 1 1 2"), settings=settings, cancelled=never, logf=logf)
    log = logf.getvalue()
    assert "Solver config:" in log
    assert "Search finished: solved" in log


@pytest.mark.parametrize("strategy", ["domains", "incremental"])
@pytest.mark.parametrize("size", [7, 8, 9])
def test_round_trip_large(strategy, size):
    settings = SolverConfig(strategy=strategy)
    generated = generate_solution(size, random.Random(0), cancelled=never)
    header = Header.of_board(generated)
    start = time.perf_counter()
    assert_solves(header, solve(header, settings=settings, cancelled=never))
    assert time.perf_counter() - start < 30


def test_search_steps_large():
    generated = generate_solution(8, random.Random(0), cancelled=never)
    header = Header.of_board(generated)
    search = Search(header, cancelled=never)
    deadline = time.perf_counter() + 30
    while search.state is SearchState.SEARCHING and time.perf_counter() < deadline:
        search.step()
    assert search.state is SearchState.SOLVED
    assert_solves(header, search.solution)


@pytest.mark.parametrize("size", [5, 6])
def test_round_trip_without_line_tables(size):
    settings = SolverConfig(line_table_max_size=0)
    generated = generate_solution(size, random.Random(1), cancelled=never)
    header = Header.of_board(generated)
    assert_solves(header, solve(header, settings=settings, cancelled=never))


class RecordingAnimation(Animation):
    def __init__(self) -> None:
        super().__init__(io.StringIO(), 0.0, sleep=lambda seconds: None)
        self.boards: list[Board] = []

    def emit(self, board: Board) -> None:
        self.boards.append(Board(board.data, board.size))
        super().emit(board)


@pytest.mark.parametrize("settings", [SolverConfig(), SolverConfig(view_filter=False)])
def test_animation_frames_are_consistent(settings):
    generated = generate_solution(6, random.Random(0), cancelled=never)
    header = Header.of_board(generated)
    animation = RecordingAnimation()
    board = solve(header, settings=settings, cancelled=never, animation=animation)
    assert_solves(header, board)

    assert len(animation.boards) == animation.frames >= 2
    for frame in animation.boards:
        for line in lines_of(frame):
            placed = [height for height in line if height]
            assert len(placed) == len(set(placed))


def test_incremental_steps():
    search = IncrementalSearch(BOARD_HEADER_3, cancelled=never)
    assert search.candidates is not None
    assert search.step() is SearchState.SEARCHING
    assert search.index == 1
    assert search.board[0, 0] == 1
    assert search.run() is SearchState.SOLVED
    assert search.solution == Board.from_rows([[1, 2, 3], [2, 3, 1], [3, 1, 2]])
    assert search.step() is SearchState.SOLVED


def test_incremental_without_candidates():
    # No line of two cells shows two cells from both of its ends.
    search = IncrementalSearch(Header.parse("2 2 2 2 2 2 2 2"), cancelled=never)
    assert all(len(line) == 0 for line in search.candidates)
    assert search.step() is SearchState.NO_SOLUTION
    assert search.stats.steps == 1
