from prefect import serve
from prefect.client.schemas.schedules import CronSchedule

from config import get_import_settings
from flows.scheduled_import import scheduled_import

DEPLOYMENT_NAME = "greenbook-import"


def build_deployments():
    settings = get_import_settings()
    return [
        scheduled_import.to_deployment(
            name=DEPLOYMENT_NAME,
            schedules=[CronSchedule(cron=settings["cron"], timezone=settings["timezone"])],
            tags=["greenbook", "import", "scheduled"],
            description="Import offices and departments from blob storage into PostgreSQL",
        )
    ]


if __name__ == "__main__":
    settings = get_import_settings()
    print(f"Serving {DEPLOYMENT_NAME} on cron '{settings['cron']}' ({settings['timezone']})")
    print("\nManual execution command:")
    print(f"  prefect deployment run 'Greenbook_Import_Scheduler/{DEPLOYMENT_NAME}'")
    serve(*build_deployments())
