"""Automated players and the batch runner."""

from agent.players import BasePlayer, PerfectPlayer, RulePlayer, get_player
from agent.runner import PlayResult, play_session, play_one, run_batch

__all__ = ["BasePlayer", "PerfectPlayer", "RulePlayer", "get_player", "PlayResult", "play_session", "play_one", "run_batch"]
