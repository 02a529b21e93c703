"""
customtkinter desktop UI for BriefDesk.
"""
