# Line-level parsers for the extraction pipeline, applied in this order:
# - lines.is_noise(line) -> bool                       # drop report boilerplate
# - cascade.match_line(line, index) -> Candidate|None  # first template wins
# - fields.clean_name / fields.clean_range             # idempotent string cleanup
# - validator.is_valid_parameter / validator.categorize
# - ranges.is_out_of_range(value, normal_range) -> bool
# - dedup.dedupe(records) -> List[Parameter]
