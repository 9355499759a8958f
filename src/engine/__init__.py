"""
Frame engine - frame text validation and buffer segmentation
"""
