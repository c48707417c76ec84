from falling_block_rl.game import GameGrid, Piece, TetrominoType, kicks_for, try_rotate


def empty_grid():
    return GameGrid(10, 23)


def test_i_piece_turns_about_cell_corner():
    piece = Piece.spawn(TetrominoType.I, 4, 3)
    assert piece.pivot == (4.5, 3.5)
    rotated = try_rotate(empty_grid(), piece, clockwise=True)
    assert rotated is not None
    assert rotated.rotation == 1
    assert sorted(rotated.blocks) == [(5, 2), (5, 3), (5, 4), (5, 5)]
    assert rotated.pivot == (4.5, 3.5)


def test_o_piece_rotation_keeps_its_cells():
    piece = Piece.spawn(TetrominoType.O, 4, 10)
    rotated = try_rotate(empty_grid(), piece)
    assert rotated is not None
    assert set(rotated.blocks) == set(piece.blocks)
    assert rotated.rotation == 1


def test_four_turns_return_to_spawn_shape():
    grid = empty_grid()
    for kind in TetrominoType:
        piece = Piece.spawn(kind, 4, 10)
        turned = piece
        for _ in range(4):
            turned = try_rotate(grid, turned, clockwise=True)
            assert turned is not None
        assert sorted(turned.blocks) == sorted(piece.blocks)
        assert turned.rotation == 0
        assert turned.pivot == piece.pivot


def test_clockwise_then_counter_clockwise_is_identity():
    grid = empty_grid()
    for kind in TetrominoType:
        piece = Piece.spawn(kind, 4, 10)
        cw = try_rotate(grid, piece, clockwise=True)
        back = try_rotate(grid, cw, clockwise=False)
        assert sorted(back.blocks) == sorted(piece.blocks)
        assert back.rotation == 0


def test_counter_clockwise_kicks_are_negated_previous_row():
    assert kicks_for(TetrominoType.T, 1, clockwise=False) == ((0, 0), (1, 0), (1, 1), (0, -2), (1, -2))
    assert kicks_for(TetrominoType.I, 0, clockwise=False) == ((0, 0), (-1, 0), (2, 0), (-1, -2), (2, 1))
    assert kicks_for(TetrominoType.J, 0) == ((0, 0), (-1, 0), (-1, -1), (0, 2), (-1, 2))


def test_t_against_left_wall_kicks_left():
    grid = empty_grid()
    piece = Piece.spawn(TetrominoType.T, 1, 10)
    assert min(x for x, _ in piece.blocks) == 0
    # Block the cell the unkicked rotation needs
    grid.commit([(1, 11)], 1)

    rotated = try_rotate(grid, piece, clockwise=True)

    assert rotated is not None
    assert rotated.rotation == 1
    assert rotated.pivot == (0.0, 10.0)
    assert sorted(rotated.blocks) == [(0, 9), (0, 10), (0, 11), (1, 10)]


def test_t_against_left_wall_falls_through_to_third_kick():
    grid = empty_grid()
    piece = Piece.spawn(TetrominoType.T, 1, 10)
    grid.commit([(1, 11), (0, 11)], 1)

    rotated = try_rotate(grid, piece, clockwise=True)

    assert rotated is not None
    assert rotated.pivot == (0.0, 9.0)
    assert sorted(rotated.blocks) == [(0, 8), (0, 9), (0, 10), (1, 9)]


def test_t_against_right_wall_kicks_right_counter_clockwise():
    grid = empty_grid()
    piece = Piece.spawn(TetrominoType.T, 8, 10)
    grid.commit([(8, 11)], 1)

    rotated = try_rotate(grid, piece, clockwise=False)

    assert rotated is not None
    assert rotated.rotation == 3
    assert rotated.pivot == (9.0, 10.0)
    assert sorted(rotated.blocks) == [(8, 10), (9, 9), (9, 10), (9, 11)]


def test_counter_clockwise_falls_through_to_lifting_kick():
    grid = empty_grid()
    piece = Piece.spawn(TetrominoType.T, 8, 10)
    grid.commit([(8, 11), (9, 11)], 1)

    rotated = try_rotate(grid, piece, clockwise=False)

    assert rotated is not None
    assert rotated.rotation == 3
    assert rotated.pivot == (9.0, 9.0)
    assert sorted(rotated.blocks) == [(8, 9), (9, 8), (9, 9), (9, 10)]


def test_rotation_fails_when_every_kick_collides():
    grid = empty_grid()
    piece = Piece.spawn(TetrominoType.T, 1, 10)
    grid.grid[:, :] = 1
    for x, y in piece.blocks:
        grid.grid[y, x] = 0

    assert try_rotate(grid, piece, clockwise=True) is None
    assert try_rotate(grid, piece, clockwise=False) is None


def test_translated_moves_pivot_with_blocks():
    piece = Piece.spawn(TetrominoType.S, 4, 3)
    moved = piece.translated(-2, 5)
    assert moved.pivot == (2.0, 8.0)
    assert moved.blocks == tuple((x - 2, y + 5) for x, y in piece.blocks)
    assert piece.blocks == Piece.spawn(TetrominoType.S, 4, 3).blocks
