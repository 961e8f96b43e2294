"""ViewModel package for UI state and command surfaces.

Call context:
    ``elfbooks.app.controller`` builds these viewmodels and binds inventory
    selection to the detail panel.

Dependencies:
    Modules in this package depend on domain types and use-case contracts
    only. I/O adapters stay behind ports.

Responsibilities:
    - Expose observable UI state and command intent methods.
    - Keep the detail panel consistent while lookups race each other.
    - Keep MVVM boundaries explicit by avoiding transport logic.
"""
