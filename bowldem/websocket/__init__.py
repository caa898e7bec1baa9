"""
WebSocket Package

Real-time leaderboard notifications.
"""
