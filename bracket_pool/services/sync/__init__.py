"""
Bracket Pool Sync Service

Keeps the pool's ``teams`` and ``games`` rows in step with upstream
sports-data providers.

Key components:
- Adapters: Fetch provider data and normalize it into canonical records
- Matchers: Reconcile provider identifiers with internal ones
- Jobs: Import, link, score, bracket, logo, results and game-day syncs
- Orchestrator: Run import → link → scores as one full sync
"""
