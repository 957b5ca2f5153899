from cluster_profile_cleaner import analyze_profiles
from cluster_profile_cleaner import cleanup_profiles
from cluster_profile_cleaner.config.settings import RunConfig
from cluster_profile_cleaner.models.outcome import ProfileStatus

# The API key is read from the SPECTROCLOUD_APIKEY environment variable

# --- Example 1: Report unused profile versions of one project ---
try:
    print("--- Analyzing cluster profiles of project 'Default' ---")
    results = analyze_profiles(RunConfig(project_name="Default", export_csv=True))

    print("\n--- Analysis Complete ---")
    print(f"Profiles checked: {results.total_checked}")
    for record in results.records_with_status(ProfileStatus.UNUSED):
        print(f"Unused: {record.name} v{record.version} ({record.scope})")

except Exception as e:
    print(f"An error occurred: {e}")


# --- Example 2: Delete one unused tenant profile, asking on the terminal ---
def ask(inspected):
    return input(f"Delete {inspected.name} v{inspected.version}? (yes/no): ")


try:
    print("\n--- Cleaning up profile 'legacy-base' ---")
    results = cleanup_profiles(
        RunConfig(profile_name="legacy-base", backup_enabled=True),
        confirm=ask,
    )
    print(f"Profiles deleted: {results.deleted_count}")

except Exception as e:
    print(f"An error occurred: {e}")
