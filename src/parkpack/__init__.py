"""
Parkpack: compile object image lists and package object directories.
"""
