"""
Core cross-cutting pieces: the exception hierarchy shared by every stage.
"""
