"""
Domain Layer

Bounded contexts:
- accounts: identity records and tiers
- social: relationship requests and connections
- resources: events, editable lists and invitations
- access: the access evaluator
- music: candidate tracks
- voting: votes, tallies and ranking
- shared: common types, events and exceptions
"""
