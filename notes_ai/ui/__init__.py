"""NiceGUI interface - thin visualization layer for the tutor chat.

Responsibilities:
    - Transcript display with markdown answers and error styling
    - Thinking indicator while a turn is pending
    - Single-file attachment upload and removal

Contains no business logic. Delegates every operation to the chat
session controller.
"""
