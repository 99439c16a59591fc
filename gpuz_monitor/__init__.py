"""In-process polling loop over the GPU-Z shared memory decoder."""
