# Repositories package.
#
# Each module exposes async functions that run plain parameterized SQL
# for a single table through the storage gateway:
#
#   post_repository  — count, paged list, lookup, create and update for posts
#
# All functions accept a StorageGateway as their first argument so that
# the caller owns the gateway's lifecycle.  Input validation and
# pagination clamping are the caller's responsibility.
