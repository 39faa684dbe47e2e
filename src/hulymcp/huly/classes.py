"""Platform class and status-category identifiers used in queries."""

PROJECT = "tracker:class:Project"
ISSUE = "tracker:class:Issue"
ISSUE_STATUS = "tracker:class:IssueStatus"

PERSON = "contact:class:Person"
CHANNEL = "contact:class:Channel"
EMAIL_PROVIDER = "contact:channelProvider:Email"

TEAMSPACE = "document:class:Teamspace"
DOCUMENT = "document:class:Document"

STATUS_CATEGORY_WON = "task:statusCategory:Won"
STATUS_CATEGORY_LOST = "task:statusCategory:Lost"
