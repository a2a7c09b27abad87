# ResultSheet - Student results manager
# Copyright (C) 2026 (linuxdev)
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
#
# You should have received a copy of the GNU General Public License
# along with this program.  If not, see <https://www.gnu.org/licenses/>.


class ResultsError(Exception):
    """Base class for errors surfaced to API callers."""

    status_code = 500

    def __init__(self, message="Unexpected error"):
        super().__init__(message)
        self.message = message


class NotFoundError(ResultsError):
    status_code = 404

    def __init__(self, entity, entity_id):
        super().__init__(f"{entity} not found")
        self.entity = entity
        self.entity_id = entity_id


class ValidationError(ResultsError):
    status_code = 400


class AuthError(ResultsError):
    status_code = 401

    def __init__(self, message="Authentication required"):
        super().__init__(message)


class PermissionDeniedError(AuthError):
    status_code = 403

    def __init__(self, message="Super admin privileges required"):
        super().__init__(message)


class TransientStoreError(ResultsError):
    """The database could not be reached; the caller may try again."""

    status_code = 503
