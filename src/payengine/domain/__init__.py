"""Domain layer for payengine.

Submodules are imported explicitly (``payengine.domain.ledger`` and so on);
the store layer depends on the entities here, so this package stays free of
eager imports.
"""
