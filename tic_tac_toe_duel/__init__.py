"""Tic-Tac-Toe against a friend or a scripted opponent."""
