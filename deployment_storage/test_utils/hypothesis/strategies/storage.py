from hypothesis import strategies as st

# Strategy for generating valid container names (no hyphens, so no "--")
container_name_strategy = st.from_regex(r"[a-z0-9]{3,63}", fullmatch=True)

# Strategy for generating container names with upper-case letters mixed in
mixed_case_container_name_strategy = st.from_regex(
    r"[A-Za-z0-9]{3,63}", fullmatch=True
)

# Strategy for generating blob path segments
blob_segment_strategy = st.from_regex(r"[A-Za-z0-9_-]{1,20}", fullmatch=True)

# Strategy for generating nested blob paths with an extension
blob_path_strategy = st.builds(
    lambda segments, extension: "/".join(segments) + "." + extension,
    st.lists(blob_segment_strategy, min_size=1, max_size=5),
    st.sampled_from(["zip", "json", "txt", "jpeg"]),
)

# Strategy for generating free-form service names
service_name_strategy = st.text(min_size=1, max_size=60)

# Strategy for generating region names
region_strategy = st.sampled_from(
    ["westus", "eastus", "eastus2", "northeurope", "westeurope", "centralus"]
)
