"""
Mailchimp Subscribe - serverless list subscription function

Receives an HTTP event with an email address, a Mailchimp list id and
optional interest ids, and makes sure the member exists on the list, is
subscribed and has those interests set.

Core modules:
- handler: Serverless entry point (validate -> subscribe -> respond)
- subscribe: Read/decide/write reconciliation
- members: Membership reader and writer
- mailchimp: Mailchimp Marketing API client
- validations: Request body decoding
- responses: Response envelope builder
- config: Environment configuration
- notifications: Teams alerts for failed invocations
- main: Command-line runner for local use
"""

__version__ = "1.0.0"

__all__ = [
    'handler',
    'subscribe',
    'members',
    'mailchimp',
    'validations',
    'responses',
    'config',
    'notifications',
    'main'
]
