"""Service layer: changesets, validation strategies and change validation.

Rejected transitions are data (field errors on the changeset), never
exceptions. Only misconfigured strategies raise.
"""
