# -*- coding: utf-8 -*-
"""Module with validations schemas for client package requests.
"""
import voluptuous as vlps

# Generous limits, real tracking numbers are no longer than 35 characters.
TRACKING_NUMBER_MAX_LENGTH = 128
FREE_TEXT_MAX_LENGTH = 100_000
NOTES_MAX_LENGTH = 1000

# Used to validate ValidateTrackingNumberHandler.get request.
VALIDATE_REQUEST_SCHEMA = vlps.Schema({
	vlps.Required('tracking_number'): vlps.All(
		str,
		vlps.Length(min=1, max=TRACKING_NUMBER_MAX_LENGTH)
	)
})

# Used to validate PackagesHandler.get request.
LIST_PACKAGES_SCHEMA = vlps.Schema({
	vlps.Optional('show_completed'): vlps.Boolean()
})

# Used to validate PackagesHandler.post request.
ADD_PACKAGES_SCHEMA = vlps.Schema({
	vlps.Required('text'): vlps.All(str, vlps.Length(min=1, max=FREE_TEXT_MAX_LENGTH)),
	vlps.Optional('notes', default=''): vlps.All(str, vlps.Length(max=NOTES_MAX_LENGTH))
})

# Used to validate PackageHandler.patch request.
UPDATE_PACKAGE_SCHEMA = vlps.All(
	vlps.Schema({
		vlps.Optional('notes'): vlps.All(str, vlps.Length(max=NOTES_MAX_LENGTH)),
		vlps.Optional('is_completed'): bool
	}),
	vlps.Length(min=1, msg='Nothing to update')
)

# Used to validate SettingsHandler.put request.
SETTINGS_SCHEMA = vlps.Schema({
	vlps.Required('show_completed'): bool
})
