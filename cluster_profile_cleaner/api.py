import logging
from typing import List
from typing import Optional
from typing import Tuple

from cluster_profile_cleaner.cleaner_service import ConfirmCallback
from cluster_profile_cleaner.cleaner_service import ProfileCleanerService
from cluster_profile_cleaner.collectors.datasource import IDataSource
from cluster_profile_cleaner.collectors.palette_api import PaletteApiClient
from cluster_profile_cleaner.collectors.profiles import ProfileAggregator
from cluster_profile_cleaner.collectors.projects import resolve_project
from cluster_profile_cleaner.config.settings import load_api_key
from cluster_profile_cleaner.config.settings import RunConfig
from cluster_profile_cleaner.models.outcome import CleanupResults
from cluster_profile_cleaner.models.profile import ClusterProfile
from cluster_profile_cleaner.storage.arrow_io import CsvSink
from cluster_profile_cleaner.storage.report import DeletionReportSink

logger = logging.getLogger(__name__)


def create_client(config: RunConfig) -> PaletteApiClient:
    """
    Build the Palette API client for a run.

    :param config: The run configuration. When it carries no API key, the key is
                   read from the SPECTROCLOUD_APIKEY environment variable.
    :raises MissingCredentialError: If no API key is available.
    """
    api_key = config.api_key or load_api_key()
    return PaletteApiClient(
        config.api_url,
        api_key,
        timeout=config.timeout,
        verify=config.verify_ssl,
    )


def collect_profiles(
    config: RunConfig, datasource: IDataSource
) -> Tuple[List[ClusterProfile], int]:
    """
    Resolve the project filter (if any) into config.project_uid, then aggregate
    the candidate profiles.

    :return: The profiles and the number of list fetches that failed without
             aborting the aggregation.

    :raises ProjectNotFoundError: If the project name matches no project.
    :raises ProfileNotFoundError: If the targeted profile name matches nothing.
    :raises AggregationError: If the baseline profile list can't be fetched.
    """
    if config.project_name and not config.project_uid:
        config.project_uid = resolve_project(datasource, config.project_name).uid

    if config.profile_name:
        if config.project_name:
            logger.info(
                "Targeting profile '%s' in project '%s'",
                config.profile_name,
                config.project_name,
            )
        else:
            logger.info("Targeting tenant-scoped profile '%s'", config.profile_name)

    aggregator = ProfileAggregator(datasource)
    profiles = aggregator.get_all_profiles(config)
    return profiles, aggregator.list_errors


def analyze_profiles(
    config: RunConfig, datasource: Optional[IDataSource] = None
) -> CleanupResults:
    """
    Report every in-scope cluster profile as UNUSED or IN USE.

    :param config: The run configuration.
    :param datasource: Optional data source, a PaletteApiClient is built from config
                       when omitted.
    :return: The outcome records and counters of the run.
    """
    logger.info("Starting analysis of unused cluster profile versions...")
    source = datasource or create_client(config)
    profiles, list_errors = collect_profiles(config, source)

    service = ProfileCleanerService(source)
    results = service.analyze(profiles, config)
    results.errors += list_errors

    if config.export_csv:
        CsvSink(config.output_dir, config.timestamp).save(results)

    logger.info("Analysis complete!")
    return results


def cleanup_profiles(
    config: RunConfig,
    confirm: Optional[ConfirmCallback] = None,
    datasource: Optional[IDataSource] = None,
) -> CleanupResults:
    """
    Delete every in-scope cluster profile that nothing references.

    :param config: The run configuration.
    :param confirm: Called for each deletion candidate unless config.confirm_all is
                    set; only the answer "yes" lets the deletion go ahead.
    :param datasource: Optional data source, a PaletteApiClient is built from config
                       when omitted.
    :return: The outcome records, deleted-items list and counters of the run.
    """
    if not config.confirm_all and confirm is None:
        raise ValueError("confirm is required unless config.confirm_all is set")

    logger.info("Starting cleanup of unused cluster profile versions...")
    source = datasource or create_client(config)
    profiles, list_errors = collect_profiles(config, source)

    service = ProfileCleanerService(source, confirm=confirm)
    results = service.cleanup(profiles, config)
    results.errors += list_errors

    if config.export_csv:
        CsvSink(config.output_dir, config.timestamp).save(results)
    DeletionReportSink(
        config.output_dir, config.timestamp, config.backup_enabled
    ).save(results)

    if results.deleted_count:
        logger.info("Cleanup complete!")
    else:
        logger.info("Cleanup complete! No unused profiles found to delete.")
    return results
