"""Users app package.

Defines the custom email-login user with guest, agent and admin roles.
Use ``apps.users.models.CustomUser`` as the AUTH_USER_MODEL throughout
the project.
"""
