from __future__ import annotations

from datetime import datetime, timedelta, timezone

from app.schemas.resume import JobPosting

_LOADED_AT = datetime.now(timezone.utc)


def _days_ago(days: int) -> datetime:
    return _LOADED_AT - timedelta(days=days)


SAMPLE_JOBS: list[JobPosting] = [
    JobPosting(
        id="1",
        title="Frontend Developer",
        company="Google",
        description="Join our team to build next-generation web applications using React, TypeScript, and modern CSS frameworks.",
        requirements=[
            "3+ years of frontend development experience",
            "Strong proficiency in React and TypeScript",
            "Experience with modern CSS frameworks",
            "Knowledge of web performance optimization",
            "Familiarity with testing frameworks",
        ],
        skills=["React", "TypeScript", "CSS", "HTML", "JavaScript", "Jest", "Webpack", "Git"],
        location="Mountain View, CA",
        type="full-time",
        experience="3-5 years",
        salary="$120k - $180k",
        posted=_days_ago(0),
        url="https://careers.google.com/jobs/frontend-dev",
    ),
    JobPosting(
        id="2",
        title="Full Stack Engineer",
        company="Microsoft",
        description="Build scalable cloud applications using .NET, Azure, and React. Work on enterprise solutions that serve millions of users.",
        requirements=[
            "5+ years of full-stack development",
            "Experience with .NET Core and C#",
            "Knowledge of Azure cloud services",
            "Frontend experience with React or Angular",
            "Database design and optimization skills",
        ],
        skills=["C#", ".NET Core", "Azure", "React", "SQL Server", "Docker", "Kubernetes", "DevOps"],
        location="Seattle, WA",
        type="full-time",
        experience="5+ years",
        salary="$140k - $220k",
        posted=_days_ago(1),
        url="https://careers.microsoft.com/jobs/fullstack",
    ),
    JobPosting(
        id="3",
        title="iOS Developer",
        company="Apple",
        description="Create innovative iOS applications that delight millions of users. Work with Swift, SwiftUI, and the latest iOS technologies.",
        requirements=[
            "4+ years of iOS development experience",
            "Expert knowledge of Swift and SwiftUI",
            "Experience with iOS SDK and frameworks",
            "App Store publishing experience",
            "Understanding of iOS design patterns",
        ],
        skills=["Swift", "SwiftUI", "iOS SDK", "Xcode", "Core Data", "UIKit", "Git", "REST APIs"],
        location="Cupertino, CA",
        type="full-time",
        experience="4+ years",
        salary="$150k - $250k",
        posted=_days_ago(2),
        url="https://jobs.apple.com/ios-developer",
    ),
    JobPosting(
        id="4",
        title="DevOps Engineer",
        company="Amazon",
        description="Scale infrastructure for AWS services. Implement CI/CD pipelines, monitoring, and automation solutions.",
        requirements=[
            "3+ years of DevOps/SRE experience",
            "Experience with AWS services",
            "Knowledge of containerization and orchestration",
            "Scripting and automation skills",
            "Monitoring and logging expertise",
        ],
        skills=["AWS", "Docker", "Kubernetes", "Terraform", "Jenkins", "Python", "Bash", "Monitoring"],
        location="Austin, TX",
        type="full-time",
        experience="3+ years",
        salary="$130k - $200k",
        posted=_days_ago(3),
        url="https://amazon.jobs/devops",
    ),
    JobPosting(
        id="5",
        title="Data Scientist",
        company="Netflix",
        description="Use machine learning and analytics to improve content recommendation and user experience.",
        requirements=[
            "PhD or Master's in Data Science/Statistics",
            "3+ years of ML/AI experience",
            "Proficiency in Python and R",
            "Experience with big data technologies",
            "Statistical modeling expertise",
        ],
        skills=["Python", "R", "TensorFlow", "Pandas", "SQL", "Spark", "Jupyter", "Statistics"],
        location="Los Gatos, CA",
        type="full-time",
        experience="3+ years",
        salary="$160k - $280k",
        posted=_days_ago(5),
        url="https://jobs.netflix.com/data-scientist",
    ),
]

_JOBS_BY_ID = {job.id: job for job in SAMPLE_JOBS}


def list_jobs() -> list[JobPosting]:
    return list(SAMPLE_JOBS)


def get_job(job_id: str) -> JobPosting | None:
    return _JOBS_BY_ID.get(job_id)
