# /concierge/utils/metrics.py

from prometheus_client import Counter, Histogram

# All Prometheus metrics used by the service live here.

# Chat turns
chat_turns_counter = Counter('chat_turns_total', 'Chat turns processed', ['outcome'])
llm_requests_counter = Counter('llm_requests_total', 'LLM provider requests', ['model', 'status'])
admission_counter = Counter('chat_admission_decisions_total', 'Per-user admission decisions', ['decision'])
response_validation_counter = Counter('response_validation_issues_total', 'Assistant replies failing quality checks', ['issue'])

# Workflows and tasks
workflow_lookup_counter = Counter('workflow_lookups_total', 'Workflow lookups by catalog', ['source'])
workflow_fallback_counter = Counter('workflow_fallback_total', 'Workflow lookups answered with the generic fallback survey')
workflow_submission_counter = Counter('workflow_submissions_total', 'Workflow answer submissions', ['kind', 'status'])
tasks_generated_counter = Counter('tasks_generated_total', 'Tasks generated for users', ['source'])

# Infrastructure
response_time_histogram = Histogram('response_time_seconds', 'Response time in seconds', ['endpoint'])
database_operations_counter = Counter('database_operations_total', 'Database operations', ['operation', 'status'])
cache_operations = Counter('cache_operations_total', 'Cache operations', ['operation', 'status'])
webhook_deliveries_counter = Counter('webhook_deliveries_total', 'Outbound webhook deliveries', ['kind', 'status'])
