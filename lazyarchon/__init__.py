"""
LazyArchon - terminal client for an Archon task server.

Architecture:
- models / providers: mirrored entities and collaborator protocols
- state / pipeline / selection / search / modals: the layered state model
- router / dispatcher: key routing and the single-threaded message reducer
- jobs / coordinator: deferred work and the background bridge
- views/: plain-text views and the Textual widgets that show them
- app.py / cli.py: application shell and entry point

Extensibility points:
1. New data sources: implement the RepositoryClient protocol
2. New messages: add a variant to messages.py and a handler in dispatcher.py
3. New modals: add a ModalKind and its sub-state class in modals.py
"""

__version__ = "0.4.0"
