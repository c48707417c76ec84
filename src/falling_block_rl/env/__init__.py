"""Gymnasium environments for Falling Block RL."""

from __future__ import annotations

from gymnasium.envs.registration import register

# Register default falling-block environment (10x20 visible board)
register(
    id="FallingBlocks-v0",
    entry_point="falling_block_rl.env.falling_blocks_env:FallingBlocksEnv",
)

__all__ = ["FallingBlocks-v0"]
