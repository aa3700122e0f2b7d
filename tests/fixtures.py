"""Shared resume and job description texts for the test suite."""

CLEAN_RESUME = (
    "Jane Doe\n"
    "jane.doe@example.com\n"
    "(555) 123-4567\n"
    "\n"
    "Professional Summary\n"
    "Backend engineer with six years of experience building Python services, data pipelines "
    "and REST APIs for high traffic products.\n"
    "\n"
    "Experience\n"
    "Senior Software Engineer, Acme Corp, January 2021 to March 2024\n"
    "- Designed and deployed microservices on Kubernetes serving two million daily requests.\n"
    "- Reduced API latency by 40% through caching with Redis and query tuning in PostgreSQL.\n"
    "- Mentored four engineers and led code reviews for the platform team.\n"
    "Software Engineer, Globex, June 2018 to December 2020\n"
    "- Built data pipelines in Python and Airflow that processed customer events every hour.\n"
    "- Wrote unit tests and integration tests that raised coverage from 55% to 90%.\n"
    "\n"
    "Education\n"
    "Bachelor of Science in Computer Science, State University, 2018\n"
    "\n"
    "Skills\n"
    "Python, FastAPI, Django, PostgreSQL, Redis, Docker, Kubernetes, AWS, Terraform, Git\n"
)

WEAK_RESUME = "John Smith\nI am a worker"

BACKEND_JD = (
    "We are hiring a Python developer with Docker and Kubernetes experience. "
    "You will design REST APIs and maintain data pipelines."
)
