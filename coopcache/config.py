class Config:
    # Cluster shape
    n_clients = 4
    client_cache_size = 8      # slots per client cache
    server_cache_size = 16     # slots in the coordinator cache (0 = disk only)
    server_disk_size = 256     # must hold the whole block universe
    n_blocks = 128             # distinct blocks requested by the workload

    # Cost model (abstract ticks, not wall-clock time)
    cache_reference_ticks = 1
    disk_to_cache_ticks = 10
    network_hop_ticks = 2

    # Workload
    trace_length = 2000
    trace_pattern = 'zipf'     # sequential | random | mixed | loop | zipf
    zipf_exponent = 1.1
    loop_length = 32
    trace_path = None          # text or .npy trace; overrides the synthetic trace when set
    save_trace_path = None     # write the synthetic trace here (.npy) for replay

    # Reproducibility
    seed = 42

    # Output
    plot = True
    plot_path = None           # save figure instead of only showing it
    verbose = False            # enable debug logging from the simulator
